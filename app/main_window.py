from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from heatsheet.config import LOG_LEVEL
from heatsheet.draw import DrawEvents, DrawState, subscribe
from heatsheet.excel_source import ExcelImportError, build_message, load_results_workbook
from heatsheet.render import Node, to_html

logger = logging.getLogger(__name__)

STYLESHEET = """
h2.race-title { margin-top: 16px; }
table.data-table { border-collapse: collapse; }
table.data-table th, table.data-table td { padding: 4px 12px; text-align: left; }
tr.row-odd { background-color: #f3f4f6; }
p.no-data { color: #6b7280; }
p.error { color: #ef4444; }
"""


class QtContainer:
    """Mounts display trees into a QTextBrowser."""

    def __init__(self, view: QTextBrowser):
        self.view = view
        self.view.document().setDefaultStyleSheet(STYLESHEET)

    def replace(self, node: Node) -> None:
        self.view.setHtml(to_html(node))


class MainWindow(QMainWindow):
    def __init__(self, events: DrawEvents):
        super().__init__()
        self.events = events
        self.setWindowTitle("Heat Sheet Viewer")
        self.resize(900, 700)

        self.results_view = QTextBrowser()
        self.container = QtContainer(self.results_view)
        subscribe(self.events, self.container)

        self.source_label = QLabel("No file loaded")

        open_btn = QPushButton("Open results")
        open_btn.clicked.connect(self.open_results)
        reload_btn = QPushButton("Reload")
        reload_btn.clicked.connect(self.reload_results)

        actions = QHBoxLayout()
        actions.addWidget(open_btn)
        actions.addWidget(reload_btn)
        actions.addWidget(self.source_label, 1)

        layout = QVBoxLayout()
        layout.addLayout(actions)
        layout.addWidget(self.results_view)
        wrapper = QWidget(); wrapper.setLayout(layout)
        self.setCentralWidget(wrapper)

        self.current_path: Path | None = None
        self.events.dispatch({"data": {"tables": {}, "fields": {}}})

    def open_results(self) -> None:
        settings = QSettings("HeatSheet", "Viewer")
        last_file = settings.value("last_opened_file", "", type=str)
        default_directory = str(Path(last_file).parent) if last_file else str(Path.home())

        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select results workbook",
            default_directory,
            "Excel files (*.xlsx *.xlsm)",
        )
        if not path:
            return

        selected_path = Path(path)
        settings.setValue("last_opened_file", str(selected_path))
        self.load_results(selected_path)

    def reload_results(self) -> None:
        if self.current_path is None:
            QMessageBox.warning(self, "Reload", "Open a results workbook first")
            return
        self.load_results(self.current_path)

    def load_results(self, path: Path) -> None:
        try:
            rows, fields = load_results_workbook(path)
        except ExcelImportError as exc:
            QMessageBox.warning(self, "Import error", str(exc))
            return

        self.current_path = path
        state = self.events.dispatch(build_message(rows, fields))
        self.source_label.setText(f"{path.name}: {len(rows)} rows")
        if state == DrawState.ERROR:
            self.statusBar().showMessage("Rendering failed, see the results pane")


def run_app() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication([])
    window = MainWindow(DrawEvents())
    window.show()
    app.exec()
