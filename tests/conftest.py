"""pytest configuration and fixtures for pyqt-popups tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset process-wide registries, caches and configs after each test."""
    yield
    from pyqt_popups.animation import set_animation_config
    from pyqt_popups.protocols import register_host_surface, set_popup_config
    from pyqt_popups.services import PopupRegistry
    from pyqt_popups.theming import BlendCache, ThemeManager

    PopupRegistry.reset_instance()
    ThemeManager.reset_instance()
    BlendCache.reset_instance()
    set_popup_config(None)
    set_animation_config(None)
    register_host_surface(None)


@pytest.fixture
def host(qapp):
    """InMemoryHost registered with setup(), with a defined Normal group."""
    from pyqt_popups import setup
    from pyqt_popups.hosts import InMemoryHost

    host = InMemoryHost(rows=40, cols=120)
    host.define_highlight("Normal", foreground="#c0c0c0", background="#202020")
    setup(host)
    return host
