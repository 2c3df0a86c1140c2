#gridpoint/application/app.py

import os
import logging
from typing import Optional

from gridpoint.domain.common.di_container import DIContainer
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.services.i_background_task_service import IBackgroundTaskService
from gridpoint.domain.services.i_config_repository_service import IConfigRepository
from gridpoint.domain.services.i_click_settings_service import IClickSettingsService
from gridpoint.domain.services.i_scheduler_service import ISchedulerService
from gridpoint.domain.services.i_display_service import IDisplayService
from gridpoint.domain.services.i_screenshot_service import IScreenshotService
from gridpoint.domain.services.i_pointer_service import IPointerService
from gridpoint.domain.services.i_surface_service import ISurfaceService
from gridpoint.domain.services.i_click_session_service import IClickSessionService

from gridpoint.infrastructure.logging.logger_service import ConsoleLoggerService, FileLoggerService
from gridpoint.infrastructure.threading.qt_background_task_service import QtBackgroundTaskService
from gridpoint.infrastructure.threading.qt_scheduler_service import QtSchedulerService
from gridpoint.infrastructure.config.json_config_repository import JsonConfigRepository
from gridpoint.infrastructure.config.click_settings_service import ClickSettingsService
from gridpoint.infrastructure.platform.qt_display_service import QtDisplayService
from gridpoint.infrastructure.platform.screenshot_service import QtScreenshotService
from gridpoint.infrastructure.platform.xdotool_pointer_service import XdotoolPointerService
from gridpoint.infrastructure.ui.qt_surface_service import QtSurfaceService
from gridpoint.infrastructure.session.click_session_service import ClickSessionService


def default_config_file() -> str:
    return os.path.join(os.path.expanduser("~"), ".config", "gridpoint", "config.json")


def initialize_app(config_file: Optional[str] = None,
                   log_level: int = logging.INFO,
                   log_dir: Optional[str] = None) -> DIContainer:
    """
    Build the service container.

    Needs a running QApplication before the Qt-backed services are resolved.
    """
    container = DIContainer()

    # Core services
    if log_dir:
        logger = FileLoggerService(level=log_level, log_dir=log_dir)
    else:
        logger = ConsoleLoggerService(level=log_level)
    container.register_instance(ILoggerService, logger)

    config_repo = JsonConfigRepository(config_file or default_config_file(), logger)
    container.register_instance(IConfigRepository, config_repo)

    thread_service = QtBackgroundTaskService(logger)
    container.register_instance(IBackgroundTaskService, thread_service)

    container.register_factory(
        IClickSettingsService,
        lambda: ClickSettingsService(
            config_repository=container.resolve(IConfigRepository),
            logger=container.resolve(ILoggerService)
        ),
        singleton=True
    )

    container.register_factory(
        ISchedulerService,
        lambda: QtSchedulerService(container.resolve(ILoggerService)),
        singleton=True
    )

    # Platform services
    container.register_factory(
        IDisplayService,
        lambda: QtDisplayService(container.resolve(ILoggerService))
    )

    container.register_factory(
        IScreenshotService,
        lambda: QtScreenshotService(container.resolve(ILoggerService)),
        singleton=True
    )

    container.register_factory(
        IPointerService,
        lambda: XdotoolPointerService(container.resolve(ILoggerService)),
        singleton=True
    )

    # Surfaces and the click session
    container.register_factory(
        ISurfaceService,
        lambda: QtSurfaceService(
            screenshot_service=container.resolve(IScreenshotService),
            logger=container.resolve(ILoggerService)
        ),
        singleton=True
    )

    container.register_factory(
        IClickSessionService,
        lambda: ClickSessionService(
            display_service=container.resolve(IDisplayService),
            screenshot_service=container.resolve(IScreenshotService),
            pointer_service=container.resolve(IPointerService),
            surface_service=container.resolve(ISurfaceService),
            scheduler=container.resolve(ISchedulerService),
            task_service=container.resolve(IBackgroundTaskService),
            settings=container.resolve(IClickSettingsService),
            logger=container.resolve(ILoggerService)
        ),
        singleton=True
    )

    logger.info("Application dependencies initialized")

    return container
