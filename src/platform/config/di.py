"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.ticketing.app.service.inventory_ledger import InventoryLedger
from src.service.ticketing.driven_adapter.notification.background_notification_dispatcher import (
    BackgroundNotificationDispatcher,
)
from src.service.ticketing.driven_adapter.notification.logging_notification_sender import (
    LoggingNotificationSender,
)
from src.service.ticketing.driven_adapter.notification.webhook_notification_sender import (
    WebhookNotificationSender,
)
from src.service.ticketing.driven_adapter.repo.archive_store_impl import ArchiveStoreImpl
from src.service.ticketing.driven_adapter.repo.booking_store_impl import BookingStoreImpl
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_archive_store_impl import (
    InMemoryArchiveStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_booking_store_impl import (
    InMemoryBookingStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_inventory_store_impl import (
    InMemoryInventoryStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.in_memory.in_memory_reconciliation_store_impl import (
    InMemoryReconciliationStoreImpl,
)
from src.service.ticketing.driven_adapter.repo.inventory_store_impl import InventoryStoreImpl
from src.service.ticketing.driven_adapter.repo.reconciliation_store_impl import (
    ReconciliationStoreImpl,
)

class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from core_setting)
    database = providers.Singleton(Database)

    # Stores (stateless for postgres - use session_factory per call)
    # STORAGE_BACKEND=memory keeps everything in-process for local runs and tests
    inventory_store = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(InMemoryInventoryStoreImpl),
        postgres=providers.Singleton(
            InventoryStoreImpl, session_factory=database.provided.session
        ),
    )
    booking_store = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(InMemoryBookingStoreImpl),
        postgres=providers.Singleton(BookingStoreImpl, session_factory=database.provided.session),
    )
    archive_store = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(InMemoryArchiveStoreImpl),
        postgres=providers.Singleton(ArchiveStoreImpl, session_factory=database.provided.session),
    )
    reconciliation_store = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(InMemoryReconciliationStoreImpl),
        postgres=providers.Singleton(
            ReconciliationStoreImpl, session_factory=database.provided.session
        ),
    )

    # Inventory Ledger - the only writer of capacity counters and lifecycle status
    inventory_ledger = providers.Singleton(
        InventoryLedger,
        inventory_store=inventory_store,
        max_attempts=config_service.provided.LEDGER_MAX_ATTEMPTS,
        retry_wait_min=config_service.provided.LEDGER_RETRY_WAIT_MIN,
        retry_wait_max=config_service.provided.LEDGER_RETRY_WAIT_MAX,
    )

    # Notification side channel
    notification_sender = providers.Selector(
        config_service.provided.NOTIFICATION_CHANNEL,
        log=providers.Singleton(LoggingNotificationSender),
        webhook=providers.Singleton(
            WebhookNotificationSender,
            url=config_service.provided.NOTIFICATION_WEBHOOK_URL,
            timeout=config_service.provided.NOTIFICATION_TIMEOUT_SECONDS,
        ),
    )
    notification_dispatcher = providers.Singleton(
        BackgroundNotificationDispatcher,
        sender=notification_sender,
        max_buffer_size=config_service.provided.NOTIFICATION_QUEUE_SIZE,
    )

container = Container()

def cleanup() -> None:
    container.reset_singletons()
