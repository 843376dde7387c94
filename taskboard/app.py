"""Application wiring: settings, logging, stores and services."""

from typing import Optional

from .auth.service import Authenticator
from .services.account_service import AccountService
from .services.task_service import TaskService
from .stores.accounts import AccountStore
from .stores.tasks import TaskStore
from .utils.config import Settings, load_settings
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class TaskboardApp:
    """Holds the configured services for one data directory"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self.accounts: Optional[AccountStore] = None
        self.tasks: Optional[TaskStore] = None
        self.authenticator: Optional[Authenticator] = None
        self.task_service: Optional[TaskService] = None
        self.account_service: Optional[AccountService] = None

    def initialize(self) -> "TaskboardApp":
        """Load configuration, set up logging and build the services"""
        if self.settings is None:
            self.settings = load_settings()
        config = self.settings

        setup_logger(
            log_level=config.logging.level,
            log_format=config.logging.format,
            file_path=config.logging.file_path,
            max_bytes=config.logging.max_bytes,
            backup_count=config.logging.backup_count,
        )

        data_dir = config.data_path
        data_dir.mkdir(parents=True, exist_ok=True)

        self.accounts = AccountStore(data_dir)
        self.tasks = TaskStore(data_dir)
        self.authenticator = Authenticator(self.accounts, config.auth)
        self.task_service = TaskService(
            self.tasks, enforce_ownership=config.policy.enforce_task_ownership
        )
        self.account_service = AccountService(self.accounts, self.tasks)

        self.authenticator.ensure_admin(config.auth.admin_email, config.auth.admin_password)

        logger.info(
            "Taskboard initialized",
            app_name=config.app.name,
            version=config.app.version,
            environment=config.app.environment,
            data_dir=str(data_dir),
            enforce_task_ownership=config.policy.enforce_task_ownership,
        )
        return self
