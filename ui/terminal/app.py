"""
Textual Application - Main TUI application
========================================

This module implements the Textual TUI for MediAI Pro: a chat pane
backed by the response selector, read-only views of the rules and
patients, and a recordings tab that can log new consultations.
"""

from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widgets import (
    Header, Footer, Static, Button, Input,
    DataTable, TabbedContent, TabPane,
)
from textual.binding import Binding
from textual.screen import Screen

from core.config import Config, load_config
from core.logging import get_logger
from core.store import MemoryStore
from services.responder import ResponseSelector
from services.records import PatientRegistry, RecordingLog

logger = get_logger("tui.app")


class ChatWidget(Container):
    """Ask questions and show the selected consultation notes."""

    def __init__(self, selector: ResponseSelector, **kwargs):
        super().__init__(**kwargs)
        self.selector = selector

    def compose(self) -> ComposeResult:
        yield Static("🩺 Medical Assistant", classes="title")
        yield VerticalScroll(id="chat-log")

        with Horizontal(classes="button-row"):
            yield Input(placeholder="Describe symptoms or ask a question...", id="chat-input")
            yield Button("Send", id="chat-send", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "chat-send":
            self.ask()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "chat-input":
            self.ask()

    def ask(self) -> None:
        input_widget = self.query_one("#chat-input", Input)
        message = input_widget.value.strip()

        if not message:
            self.app.notify("Please enter a message!", severity="warning")
            return

        input_widget.value = ""
        reply = self.selector.respond(message)

        log = self.query_one("#chat-log", VerticalScroll)
        log.mount(Static(f"You: {message}", classes="user-message"))
        log.mount(Static(reply.response, classes="assistant-message"))
        log.mount(Static(
            f"{reply.provider} | rule: {reply.rule} | {reply.timestamp}",
            classes="message-meta"
        ))
        log.scroll_end(animate=False)


class RulesWidget(Container):
    """Rules in evaluation order."""

    def __init__(self, selector: ResponseSelector, **kwargs):
        super().__init__(**kwargs)
        self.selector = selector

    def compose(self) -> ComposeResult:
        yield Static("📋 Response Rules", classes="title")
        yield DataTable(id="rules-table")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns("#", "Rule", "Match", "Keywords")
        table.cursor_type = "row"

        engine = self.selector.rules_engine
        for position, rule in enumerate(engine.get_all_rules(), start=1):
            table.add_row(str(position), rule.name, rule.match_type.value, ", ".join(rule.patterns))
        table.add_row("-", "fallback", "-", engine.fallback.name or "custom text")


class PatientsWidget(Container):
    """Patients currently held in memory."""

    def __init__(self, patients: PatientRegistry, **kwargs):
        super().__init__(**kwargs)
        self.patients = patients

    def compose(self) -> ComposeResult:
        yield Static("👤 Patients", classes="title")

        with Horizontal(classes="toolbar"):
            yield Button("🔄 Refresh", id="btn-refresh-patients", variant="default")

        yield DataTable(id="patients-table")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns("ID", "Name", "Age", "Conditions", "Last Visit")
        table.cursor_type = "row"
        self.load_patients()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-refresh-patients":
            self.load_patients()
            self.app.notify("Patients refreshed!")

    def load_patients(self) -> None:
        table = self.query_one(DataTable)
        table.clear()

        for patient in self.patients.list():
            table.add_row(
                patient.id,
                patient.name,
                str(patient.age),
                ", ".join(patient.conditions) or "—",
                patient.lastVisit[:10] if patient.lastVisit else "—",
            )


class RecordingsWidget(Container):
    """Consultation recordings, newest first."""

    def __init__(self, recordings: RecordingLog, **kwargs):
        super().__init__(**kwargs)
        self.recordings = recordings

    def compose(self) -> ComposeResult:
        yield Static("🎙️ Recordings", classes="title")

        with Horizontal(classes="toolbar"):
            yield Input(placeholder="Patient name", id="recording-patient")
            yield Input(placeholder="Summary", id="recording-summary")
            yield Button("💾 Save", id="btn-add-recording", variant="primary")
            yield Button("🔄 Refresh", id="btn-refresh-recordings", variant="default")

        yield DataTable(id="recordings-table")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns("Date", "Patient", "Duration", "Summary")
        table.cursor_type = "row"
        self.load_recordings()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-add-recording":
            self.save_recording()
        elif event.button.id == "btn-refresh-recordings":
            self.load_recordings()
            self.app.notify("Recordings refreshed!")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("recording-patient", "recording-summary"):
            self.save_recording()

    def save_recording(self) -> None:
        patient_input = self.query_one("#recording-patient", Input)
        summary_input = self.query_one("#recording-summary", Input)
        patient_name = patient_input.value.strip()

        if not patient_name:
            self.app.notify("Please enter a patient name!", severity="warning")
            return

        recording = self.recordings.create({
            "patientName": patient_name,
            "summary": summary_input.value.strip(),
        })
        patient_input.value = ""
        summary_input.value = ""

        self.load_recordings()
        self.app.notify(f"Recording {recording.id} saved")

    def load_recordings(self) -> None:
        table = self.query_one(DataTable)
        table.clear()

        for recording in self.recordings.list():
            summary = recording.summary
            if len(summary) > 40:
                summary = summary[:40] + "..."
            table.add_row(
                recording.date[:16],
                recording.patientName,
                f"{recording.duration:g}s" if recording.duration is not None else "—",
                summary or "—",
            )


class MainScreen(Screen):
    """Main application screen."""

    BINDINGS = [
        Binding("ctrl+r", "refresh", "Refresh"),
        Binding("f1", "chat", "Chat"),
        Binding("f2", "rules", "Rules"),
        Binding("f3", "patients", "Patients"),
        Binding("f4", "recordings", "Recordings"),
    ]

    def compose(self) -> ComposeResult:
        app = self.app
        yield Header(show_clock=True)

        with TabbedContent(id="main-tabs"):
            with TabPane("🩺 Chat", id="chat"):
                yield ChatWidget(app.selector)

            with TabPane("📋 Rules", id="rules"):
                yield RulesWidget(app.selector)

            with TabPane("👤 Patients", id="patients"):
                yield PatientsWidget(app.patients)

            with TabPane("🎙️ Recordings", id="recordings"):
                yield RecordingsWidget(app.recordings)

        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#chat-input", Input).focus()

    def action_refresh(self) -> None:
        self.query_one(PatientsWidget).load_patients()
        self.query_one(RecordingsWidget).load_recordings()
        self.app.notify("🔄 All data refreshed!")

    def action_chat(self) -> None:
        self.query_one(TabbedContent).active = "chat"

    def action_rules(self) -> None:
        self.query_one(TabbedContent).active = "rules"

    def action_patients(self) -> None:
        self.query_one(TabbedContent).active = "patients"

    def action_recordings(self) -> None:
        self.query_one(TabbedContent).active = "recordings"


class MediAIApp(App):
    """
    MediAI Pro Terminal UI Application.

    Shares its selector and stores with nothing else; a TUI session
    starts from the sample patients and an empty recording log.
    """

    TITLE = "MediAI Pro"

    CSS = """
    Screen {
        background: $surface;
    }

    .title {
        text-style: bold;
        color: $accent;
        margin: 1 0;
    }

    #chat-log {
        height: 1fr;
        border: solid $primary;
        padding: 0 1;
    }

    .user-message {
        color: $accent;
        text-style: bold;
        margin: 1 0 0 0;
    }

    .assistant-message {
        background: $panel;
        padding: 1;
    }

    .message-meta {
        color: $text-muted;
        margin: 0 0 1 0;
    }

    .toolbar {
        height: auto;
        margin-bottom: 1;
    }

    .button-row {
        height: auto;
        margin: 1 0;
    }

    #chat-input {
        width: 1fr;
    }

    #recording-patient {
        width: 1fr;
    }

    #recording-summary {
        width: 2fr;
    }

    ChatWidget {
        height: 100%;
    }

    DataTable {
        height: 100%;
        margin: 1 0;
    }

    TabbedContent {
        height: 100%;
    }

    TabPane {
        padding: 1;
    }

    Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: Optional[Config] = None,
        selector: Optional[ResponseSelector] = None
    ):
        super().__init__()

        self.config = config or load_config()

        self.selector = selector or ResponseSelector.from_config(self.config)

        self.patients = PatientRegistry(MemoryStore("patients", label="Patient"))
        if self.config.store.seed_sample_patients:
            self.patients.seed_samples()

        self.recordings = RecordingLog(MemoryStore("recordings", label="Recording"))

        self.install_screen(MainScreen(), name="main")

    def on_mount(self) -> None:
        self.theme = "textual-light" if self.config.ui.tui_theme == "light" else "textual-dark"
        logger.info("TUI started")
        self.push_screen("main")

    def action_quit(self) -> None:
        self.exit()


def run_tui(config: Optional[Config] = None) -> None:
    app = MediAIApp(config=config)
    app.run()


if __name__ == "__main__":
    run_tui()
