"""NiceGUI knowledge search page bound to a KnowledgeSession."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from nicegui import ui
from nicegui.events import MultiUploadEventArguments

from src.agent.client import AgentApiClient
from src.agent.config import get_session_config
from src.models.schemas import ConversationEntry, Evidence, FileBlob
from src.session.session import KnowledgeSession
from src.ui.formatting import format_file_size, format_percent, markdown_to_html

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #020617; color: #f1f5f9; min-height: 100vh; }

    .sidebar { background: #020617; border-right: 1px solid #1e293b; }

    .message-user {
        background: #9333ea;
        color: white;
        border-radius: 8px;
    }

    .answer-card { background: #0f172a; border: 1px solid #1e293b; border-radius: 8px; }

    .error-box {
        background: rgba(239, 68, 68, 0.1);
        border: 1px solid rgba(239, 68, 68, 0.2);
        border-radius: 8px;
    }
</style>
"""


def create_session() -> KnowledgeSession:
    """Build a session talking to the configured service."""
    config = get_session_config()
    client = AgentApiClient(config)
    return KnowledgeSession(config, uploader=client, agent=client)


@ui.page("/")
def chat_page() -> None:
    """Main knowledge search page."""
    ui.add_head_html(CUSTOM_CSS)
    session = create_session()
    ui.context.client.on_delete(session.aclose)

    async def handle_upload(e: MultiUploadEventArguments) -> None:
        blobs = [
            FileBlob(name=f.name, content=await f.read(), content_type=f.content_type)
            for f in e.files
        ]
        upload_zone.reset()
        await session.upload(blobs)
        refresh()

    def handle_delete(document_id: str) -> None:
        session.delete_document(document_id)
        refresh()

    async def run_submission(submission: Coroutine[Any, Any, object]) -> None:
        task = asyncio.create_task(submission)
        # Let the submission record the user entry before the first redraw
        await asyncio.sleep(0)
        refresh()
        await task
        refresh()

    async def handle_submit() -> None:
        await run_submission(session.submit())

    async def handle_select(question: str) -> None:
        await run_submission(session.select_suggestion(question))

    def handle_clear() -> None:
        session.clear_chat()
        refresh()

    def handle_dismiss() -> None:
        session.dismiss_error()
        refresh()

    def refresh() -> None:
        document_list.refresh()
        conversation.refresh()

    def render_evidence(source: Evidence) -> None:
        with ui.element("div").classes("answer-card p-3 w-full"):
            with ui.row().classes("w-full justify-between items-start"):
                with ui.column().classes("gap-1"):
                    ui.label(source.title).classes("text-sm font-medium")
                    if source.url:
                        ui.link("View source", source.url, new_tab=True).classes(
                            "text-xs text-purple-400"
                        )
                ui.badge(f"{format_percent(source.relevance)} match").props("outline")
            if source.excerpt:
                with ui.expansion("Excerpt").classes("w-full text-xs text-slate-400"):
                    ui.label(source.excerpt).classes("text-sm text-slate-300")

    def render_answer(entry: ConversationEntry) -> None:
        with ui.column().classes("w-full max-w-3xl gap-3"):
            with ui.element("div").classes("answer-card p-4 w-full"):
                with ui.row().classes("w-full justify-between items-center"):
                    ui.label("Answer").classes("text-sm font-semibold")
                    ui.button(
                        icon="content_copy",
                        on_click=lambda: ui.clipboard.write(entry.text),
                    ).props("flat round dense size=sm")
                ui.html(markdown_to_html(entry.text), sanitize=False).classes(
                    "text-sm leading-relaxed text-slate-200"
                )

            if entry.confidence is not None:
                with ui.row().classes("items-center gap-2 px-4"):
                    ui.linear_progress(value=entry.confidence, show_value=False).classes("w-20")
                    ui.label(f"{format_percent(entry.confidence)} confidence").classes(
                        "text-xs text-slate-400"
                    )

            if entry.related_topics:
                ui.label("Related Topics:").classes("text-xs text-slate-400 font-medium")
                with ui.row().classes("gap-2"):
                    for topic in entry.related_topics:
                        ui.badge(topic).props("outline")

            if entry.evidence:
                with ui.expansion(f"Sources ({len(entry.evidence)})", value=True).classes("w-full"):
                    for source in entry.evidence:
                        render_evidence(source)

            if entry.follow_ups:
                ui.label("Follow-up Questions:").classes("text-xs text-slate-400 font-medium")
                for question in entry.follow_ups:
                    ui.button(
                        question, on_click=lambda q=question: handle_select(q)
                    ).props("outline no-caps align=left").classes("w-full text-xs")

    @ui.refreshable
    def document_list() -> None:
        docs = session.state.documents
        ui.badge(f"{len(docs)} file{'s' if len(docs) != 1 else ''}")
        if not docs:
            ui.label("No documents uploaded yet").classes("text-xs text-slate-500 py-8")
            return
        for doc in docs:
            with ui.row().classes("w-full items-start gap-2 p-3 rounded-lg bg-slate-900"):
                ui.icon("description").classes("text-slate-500")
                with ui.column().classes("flex-grow gap-0 min-w-0"):
                    ui.label(doc.name).classes("text-sm font-medium truncate")
                    details = format_file_size(doc.size_bytes)
                    if doc.page_count:
                        details += f"  {doc.page_count}p"
                    ui.label(details).classes("text-xs text-slate-500")
                ui.button(
                    icon="delete", on_click=lambda d=doc.id: handle_delete(d)
                ).props("flat round dense color=red")

    @ui.refreshable
    def conversation() -> None:
        state = session.state
        if not state.history:
            with ui.column().classes("w-full items-center py-12 gap-4"):
                ui.icon("search").classes("text-6xl text-slate-600")
                ui.label("Start Searching Your Documents").classes("text-2xl font-bold")
                ui.label(
                    "Upload PDF documents and ask intelligent questions about their contents."
                ).classes("text-slate-400")
            if session.dispatcher.should_offer():
                ui.label("Try asking about:").classes("text-sm text-slate-400 font-medium")
                with ui.grid(columns=2).classes("w-full gap-2"):
                    for question in session.dispatcher.suggestions:
                        ui.button(
                            question, on_click=lambda q=question: handle_select(q)
                        ).props("outline no-caps align=left")

        for entry in state.history:
            if entry.is_user:
                with ui.row().classes("w-full justify-end"):
                    ui.label(entry.text).classes("message-user px-4 py-3 max-w-2xl")
            else:
                with ui.row().classes("w-full justify-start"):
                    render_answer(entry)

        if state.submission_in_flight:
            with ui.row().classes("items-center gap-2 text-slate-400"):
                ui.spinner(color="purple")
                ui.label("Searching your documents...").classes("text-sm")

        if state.last_error:
            with ui.row().classes("w-full error-box p-4 items-start gap-3"):
                ui.icon("error").classes("text-red-500")
                ui.label(state.last_error).classes("flex-grow text-sm text-red-200")
                ui.button(icon="close", on_click=handle_dismiss).props("flat round dense")

    # === UI Layout ===
    with ui.header().classes("bg-slate-900 border-b border-slate-800 px-6 py-4"):
        ui.icon("search").classes("text-purple-500 text-2xl")
        ui.label("Knowledge Search").classes("text-2xl font-bold")

    with ui.row().classes("w-full no-wrap gap-0").style("height: calc(100vh - 5rem)"):
        with ui.column().classes("sidebar w-60 h-full p-4 gap-3"):
            ui.label("Your Documents").classes("text-lg font-semibold")
            upload_zone = (
                ui.upload(on_multi_upload=handle_upload, multiple=True, auto_upload=True)
                .props('accept=".pdf" flat bordered')
                .classes("w-full")
                .bind_enabled_from(session.state, "upload_in_flight", backward=lambda b: not b)
            )
            ui.linear_progress(show_value=False).bind_value_from(
                session.state, "upload_progress", backward=lambda p: p / 100
            ).bind_visibility_from(session.state, "upload_progress", backward=lambda p: 0 < p < 100)
            ui.label().bind_text_from(
                session.state, "upload_progress", backward=lambda p: f"{p}% uploaded"
            ).bind_visibility_from(
                session.state, "upload_progress", backward=lambda p: 0 < p < 100
            ).classes("text-xs text-slate-400")
            with ui.scroll_area().classes("flex-grow w-full"):
                document_list()

        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.scroll_area().classes("flex-grow w-full"):
                with ui.column().classes("max-w-4xl mx-auto w-full p-6 gap-6"):
                    conversation()

            with ui.column().classes("w-full p-6 border-t border-slate-800 bg-slate-900"):
                (
                    ui.textarea(
                        placeholder="Ask anything about your documents... (Ctrl+Enter to search)"
                    )
                    .props("autogrow outlined dark")
                    .classes("w-full")
                    .bind_value(session.state, "pending_input")
                    .on("keydown.ctrl.enter", handle_submit)
                    .bind_enabled_from(
                        session.state,
                        "submission_in_flight",
                        backward=lambda busy: not busy and bool(session.state.documents),
                    )
                )
                with ui.row().classes("w-full justify-end gap-2"):
                    (
                        ui.button("Clear Chat", on_click=handle_clear)
                        .props("outline")
                        .bind_visibility_from(session.state, "history", backward=bool)
                    )
                    (
                        ui.button("Search", icon="search", on_click=handle_submit)
                        .props("color=purple")
                        .bind_enabled_from(
                            session.state,
                            "pending_input",
                            backward=lambda _: session.controller.can_submit(),
                        )
                    )
