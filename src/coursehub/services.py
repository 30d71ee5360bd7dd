"""Wiring of catalog, planner, gateway and registration queue from Settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from coursehub.catalog import CourseCatalog, load_catalog
from coursehub.config import Settings
from coursehub.gateway import SimulatedGateway
from coursehub.planner import (
    HttpScheduleProposer,
    PreferenceProposer,
    PresetRegistry,
    ScheduleAssembler,
    ScheduleProposer,
)
from coursehub.registration import (
    InMemoryIntentStore,
    IntentStore,
    RegistrationQueue,
    RetryPolicy,
    SqlIntentStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the API and CLI need, built once per process."""

    settings: Settings
    catalog: CourseCatalog
    presets: PresetRegistry
    proposer: ScheduleProposer
    assembler: ScheduleAssembler
    gateway: SimulatedGateway
    store: IntentStore
    queue: RegistrationQueue

    def close(self) -> None:
        """Release HTTP clients and database connections."""
        if isinstance(self.proposer, HttpScheduleProposer):
            self.proposer.close()
        if isinstance(self.store, SqlIntentStore):
            self.store.close()


def build_proposer(settings: Settings) -> ScheduleProposer:
    """Remote proposer when a URL is configured, local search otherwise."""
    if settings.proposer_url:
        logger.info("Using remote schedule proposer at %s", settings.proposer_url)
        return HttpScheduleProposer(settings.proposer_url, timeout=settings.proposer_timeout)
    return PreferenceProposer()


def build_store(settings: Settings) -> IntentStore:
    if settings.uses_memory_store:
        return InMemoryIntentStore()
    return SqlIntentStore(settings.db_path)


def build_services(
    settings: Settings | None = None,
    catalog: CourseCatalog | None = None,
    gateway: SimulatedGateway | None = None,
) -> Services:
    """Build the service graph.

    Args:
        settings: Runtime settings (defaults if omitted).
        catalog: Catalog to use instead of loading settings.catalog_path.
        gateway: Gateway to use instead of a SimulatedGateway.

    Returns:
        A Services bundle. Call close() when done.
    """
    settings = settings or Settings()
    if catalog is None:
        catalog = load_catalog(settings.catalog_path)
    presets = PresetRegistry()
    proposer = build_proposer(settings)
    if gateway is None:
        gateway = SimulatedGateway(failure_rate=settings.gateway_failure_rate)
    store = build_store(settings)
    queue = RegistrationQueue(
        store=store,
        gateway=gateway,
        retry_policy=RetryPolicy(
            max_attempts=settings.max_attempts,
            terminal_markers=tuple(settings.terminal_markers),
        ),
    )
    logger.info("Loaded catalog with %d courses", len(catalog))
    return Services(
        settings=settings,
        catalog=catalog,
        presets=presets,
        proposer=proposer,
        assembler=ScheduleAssembler(catalog, proposer=proposer, presets=presets),
        gateway=gateway,
        store=store,
        queue=queue,
    )
