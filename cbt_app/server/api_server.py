"""FastAPI server that exposes menus and the test session to the web client."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from cbt_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from cbt_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from cbt_app.core.models import Certificate, MenuEntry, OptionTag, Role, Survey, TestResult
from cbt_app.core.services.submission_service import SubmissionError
from cbt_app.core.services.test_session import SessionStateError, TestSessionEngine
from cbt_app.core.test_manager import AccessDeniedError, TestManager


class SignInPayload(BaseModel):
    """Payload schema for selecting the acting user."""

    user_id: str
    role: str
    permissions: list[str] | None = None


class StartTestPayload(BaseModel):
    online: bool = True


class AnswerPayload(BaseModel):
    """Payload schema for a selected option. A null option clears the selection."""

    index: int
    option: str | None


class IndexPayload(BaseModel):
    index: int


class ConnectivityPayload(BaseModel):
    online: bool


def _get_test_manager_dependency(test_manager: TestManager):
    def dependency() -> TestManager:
        return test_manager

    return dependency


def _menu_entry_payload(entry: MenuEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "label": entry.label,
        "icon": entry.icon,
        "required_permissions": sorted(entry.required_permissions),
    }


def _survey_payload(survey: Survey) -> dict[str, object]:
    return {
        "id": survey.id,
        "name": survey.name,
        "description": survey.description,
        "duration_minutes": survey.duration_minutes,
        "total_questions": survey.total_questions,
        "passing_percentage": survey.passing_percentage,
        "max_attempts": survey.max_attempts,
    }


def _result_payload(result: TestResult) -> dict[str, object]:
    return {
        "session_id": result.session_id,
        "total_questions": result.total_questions,
        "attempted": result.attempted,
        "correct": result.correct,
        "percentage": result.percentage,
        "passed": result.passed,
        "total_points": result.total_points,
        "obtained_points": result.obtained_points,
        "time_taken_seconds": result.time_taken_seconds,
        "section_scores": dict(result.section_scores),
        "generated_at": result.generated_at.isoformat(),
    }


def _certificate_payload(certificate: Certificate | None) -> dict[str, object] | None:
    if certificate is None:
        return None
    return {
        "certificate_number": certificate.certificate_number,
        "survey_id": certificate.survey_id,
        "percentage": certificate.percentage,
        "issued_at": certificate.issued_at.isoformat(),
        "verification_token": certificate.verification_token,
        "is_valid": certificate.is_valid,
    }


def _session_payload(session: TestSessionEngine, manager: TestManager) -> dict[str, object]:
    question = session.current_question
    index = session.current_index
    summary = session.summary()
    selected = session.selected_option(index)
    fatal_error = manager.fatal_error
    return {
        "session_id": session.session_id,
        "test_id": session.test_id,
        "state": session.state.value if session.state else None,
        "pause_reason": session.pause_reason.value if session.pause_reason else None,
        "online": session.is_online,
        "remaining_seconds": session.remaining_seconds,
        "remaining_display": session.format_remaining(),
        "low_on_time": session.is_low_on_time,
        "current_index": index,
        "question_count": session.question_count,
        "question": {
            "id": question.id,
            "section_id": question.section_id,
            "text": question.question_text,
            "options": {tag.value: question.option_text(tag) for tag in OptionTag},
            "selected": selected.value if selected else None,
            "marked_for_review": index in session.marked_for_review(),
        },
        "statuses": [session.question_status(i).value for i in range(session.question_count)],
        "summary": {
            "total": summary.total,
            "answered": summary.answered,
            "marked": summary.marked,
            "not_attempted": summary.not_attempted,
        },
        "result": _result_payload(session.result) if session.result else None,
        "fatal_error": str(fatal_error) if fatal_error else None,
        "warnings": manager.drain_warnings(),
    }


def _active_session(manager: TestManager) -> TestSessionEngine:
    try:
        return manager.require_active_session()
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def create_api_app(test_manager: TestManager) -> FastAPI:
    """Create a FastAPI application wired to the provided test manager."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    test_manager_dep = _get_test_manager_dependency(test_manager)

    @app.post("/session/sign-in", status_code=201)
    def sign_in(
        payload: SignInPayload,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        manager.sign_in(payload.user_id, payload.role, payload.permissions)
        role = Role.parse(payload.role)
        return {
            "user_id": payload.user_id,
            "role": role.value if role else payload.role,
            "role_label": role.label if role else None,
            "menu": [_menu_entry_payload(entry) for entry in manager.menu_items()],
        }

    @app.get("/menu")
    def get_menu(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        return {"menu": [_menu_entry_payload(entry) for entry in manager.menu_items()]}

    @app.get("/menu/{menu_id}")
    def resolve_menu(menu_id: str, manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        return {
            "requested": menu_id,
            "allowed": manager.can_access(menu_id),
            "active": manager.resolve_menu(menu_id),
        }

    @app.get("/permissions/{permission_id}")
    def check_permission(
        permission_id: str,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        return {"permission": permission_id, "allowed": manager.can_perform(permission_id)}

    @app.get("/tests")
    def list_tests(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        return {"tests": [_survey_payload(survey) for survey in manager.available_tests()]}

    @app.post("/tests/{test_id}/start", status_code=201)
    def start_test(
        test_id: str,
        payload: StartTestPayload | None = None,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        online = payload.online if payload is not None else True
        try:
            session = manager.start_test(test_id, online=online)
        except AccessDeniedError as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown test {test_id}") from exc
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _session_payload(session, manager)

    @app.get("/test-session")
    def get_session(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        return _session_payload(_active_session(manager), manager)

    @app.post("/test-session/answer")
    def select_answer(
        payload: AnswerPayload,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        session = _active_session(manager)
        try:
            if payload.option is None:
                session.clear_answer(payload.index)
            else:
                session.select_answer(payload.index, payload.option)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _session_payload(session, manager)

    @app.post("/test-session/review")
    def toggle_review(
        payload: IndexPayload,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        session = _active_session(manager)
        try:
            session.toggle_review(payload.index)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _session_payload(session, manager)

    @app.post("/test-session/navigate")
    def navigate(
        payload: IndexPayload,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        session = _active_session(manager)
        try:
            session.navigate(payload.index)
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _session_payload(session, manager)

    @app.post("/test-session/connectivity")
    def set_connectivity(
        payload: ConnectivityPayload,
        manager: TestManager = Depends(test_manager_dep),
    ) -> dict[str, object]:
        session = _active_session(manager)
        manager.set_online(payload.online)
        return _session_payload(session, manager)

    @app.post("/test-session/save")
    def save_progress(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        session = _active_session(manager)
        try:
            saved = session.save_progress()
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"saved": saved, "warnings": manager.drain_warnings()}

    @app.post("/test-session/exit")
    def exit_test(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        session = _active_session(manager)
        try:
            manager.exit_test()
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"session_id": session.session_id, "state": session.state.value if session.state else None}

    @app.post("/test-session/submit")
    def submit_test(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        _active_session(manager)
        try:
            result = manager.submit_test()
        except SubmissionError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        if result is None:
            raise HTTPException(status_code=409, detail="A submission is already in progress.")
        return {
            "result": _result_payload(result),
            "certificate": _certificate_payload(manager.last_certificate),
        }

    @app.get("/certificates")
    def list_certificates(manager: TestManager = Depends(test_manager_dep)) -> dict[str, object]:
        return {
            "certificates": [
                _certificate_payload(certificate) for certificate in manager.certificates_for_user()
            ]
        }

    return app


def start_api_server(
    test_manager: TestManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(test_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="CbtApiServer", daemon=True)
    thread.start()
    return thread
