import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from ui.widgets import Sidebar  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


def test_processing_disables_new_creation_and_history(qapp):
    sidebar = Sidebar()

    sidebar.set_processing(True)

    assert not sidebar.new_button.isEnabled()
    assert not sidebar.history_list.isEnabled()

    sidebar.set_processing(False)

    assert sidebar.new_button.isEnabled()
    assert sidebar.history_list.isEnabled()
