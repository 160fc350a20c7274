"""
Test data generation workflows for developer mode
"""

import logging
import math
from typing import Optional

from app.core.config import settings
from app.core.exceptions import (
    AppError,
    NoUniqueRelationshipsError,
    NotAuthenticatedError,
)
from app.schemas.devmode import GenerateRequest, GenerationResult, GenerationState
from app.services.batch_inserter import BatchInserter, ProgressCallback, chunked
from app.services.dev_state import DevStateStore
from app.services.entity_generator import EntityGenerator
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class DataGeneratorService:
    """Generates and stores synthetic guests, tables and relationships"""

    def __init__(
        self,
        store: RecordStore,
        dev_state: DevStateStore,
        options: Optional[GenerateRequest] = None,
        generator: Optional[EntityGenerator] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.dev_state = dev_state
        self.options = options or GenerateRequest()
        self.generator = generator or EntityGenerator()
        self.on_progress = on_progress
        self.state = GenerationState()

    def _inserter(self) -> BatchInserter:
        return BatchInserter(
            self.store,
            self.dev_state,
            clear_existing=self.options.clear_existing,
            on_progress=self.on_progress,
        )

    @staticmethod
    def _require_user(user_id: Optional[str]) -> str:
        if not user_id:
            raise NotAuthenticatedError()
        return user_id

    async def _run(self, operation, *args) -> GenerationResult:
        self.state.start()
        try:
            result = await operation(*args)
        except AppError as e:
            logger.error(f"Error generating test data: {e}")
            self.state.fail(e.message)
            raise
        except Exception as e:
            logger.error(f"Unexpected error generating test data: {e}")
            self.state.fail("Unexpected error generating test data")
            raise
        self.state.succeed(result.message)
        return result

    async def generate_guests(self, user_id: Optional[str]) -> GenerationResult:
        return await self._run(self._generate_guests, user_id)

    async def generate_tables(self, user_id: Optional[str]) -> GenerationResult:
        return await self._run(self._generate_tables, user_id)

    async def generate_relationships(self, user_id: Optional[str]) -> GenerationResult:
        return await self._run(self._generate_relationships, user_id)

    async def generate_all(self, user_id: Optional[str]) -> GenerationResult:
        """Guests, then tables, then relationships; the first failure stops the rest"""
        return await self._run(self._generate_all, user_id)

    async def _generate_all(self, user_id: Optional[str]) -> GenerationResult:
        guests = await self._generate_guests(user_id)
        tables = await self._generate_tables(user_id)
        relationships = await self._generate_relationships(user_id)

        progress = []
        for part in (guests, tables, relationships):
            progress.extend(part.progress)
        return GenerationResult(
            kind="all",
            requested=guests.requested + tables.requested + relationships.requested,
            generated=guests.generated + tables.generated + relationships.generated,
            message="Generated all test data successfully",
            progress=progress,
        )

    async def _generate_guests(self, user_id: Optional[str]) -> GenerationResult:
        await self.dev_state.simulate_network_delay()
        user_id = self._require_user(user_id)
        count = self.options.guest_count
        inserter = self._inserter()
        await inserter.clear_if_requested("guests", user_id)

        batches = self.generator.generate_guests(count, self.options.batch_size, user_id)
        inserted = await inserter.insert_batches("guests", batches, total=count, label="guests")

        # Single-batch runs do not surface intermediate progress
        progress = inserter.progress if math.ceil(count / self.options.batch_size) > 1 else []
        logger.info(f"Generated {inserted} guests for user {user_id}")
        return GenerationResult(
            kind="guests",
            requested=count,
            generated=inserted,
            message=f"Generated {inserted} guests successfully",
            progress=progress,
        )

    async def _generate_tables(self, user_id: Optional[str]) -> GenerationResult:
        await self.dev_state.simulate_network_delay()
        user_id = self._require_user(user_id)
        count = self.options.table_count
        inserter = self._inserter()
        await inserter.clear_if_requested("tables", user_id)

        tables = self.generator.generate_tables(count, user_id)
        inserted = await inserter.insert_batches("tables", [tables], total=count, label="tables")

        logger.info(f"Generated {inserted} tables for user {user_id}")
        return GenerationResult(
            kind="tables",
            requested=count,
            generated=inserted,
            message=f"Generated {inserted} tables successfully",
        )

    async def _generate_relationships(self, user_id: Optional[str]) -> GenerationResult:
        await self.dev_state.simulate_network_delay()
        user_id = self._require_user(user_id)
        requested = self.options.relationship_count
        inserter = self._inserter()
        await inserter.clear_if_requested("guest_relationships", user_id)

        guest_ids = [row["id"] for row in self.store.select("guests", {"user_id": user_id})]
        relationships = self.generator.generate_relationships(requested, user_id, guest_ids)
        if not relationships:
            raise NoUniqueRelationshipsError()

        inserted = await inserter.insert_batches(
            "guest_relationships",
            chunked(relationships, settings.RELATIONSHIP_CHUNK_SIZE),
            total=len(relationships),
            label="relationships",
        )

        if inserted < requested:
            message = (
                f"Created {inserted} relationships (requested {requested}). "
                "Add more guests for more relationships."
            )
        else:
            message = f"Generated {inserted} relationships successfully"
        logger.info(f"Generated {inserted}/{requested} relationships for user {user_id}")
        return GenerationResult(
            kind="relationships",
            requested=requested,
            generated=inserted,
            message=message,
        )
