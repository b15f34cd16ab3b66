import pytest
from streamlit.testing.v1 import AppTest

from ser_ui.client import InferenceClient
from ser_ui.controller import INVALID_FILE_MESSAGE, InteractionController
from ser_ui.schemas import EmotionResult

from conftest import SAMPLE_RESULT, FakeHandleFactory, StubSession, make_response

PAGE = "../Frontend/streamlit_app.py"
SECTIONS = ["Original Audio", "Analysis Overview", "Emotion Distribution", "Detailed Analysis"]


@pytest.fixture
def session():
    return StubSession(make_response(payload=SAMPLE_RESULT))


@pytest.fixture
def controller(client_settings, session):
    return InteractionController(
        client=InferenceClient(client_settings, session=session),
        handle_factory=FakeHandleFactory(),
        settings=client_settings,
    )


def run_page(controller):
    at = AppTest.from_file(PAGE, default_timeout=30)
    at.session_state["controller"] = controller
    return at.run()


def test_only_the_form_shows_without_a_result(controller):
    at = run_page(controller)

    assert not at.exception
    assert [s.value for s in at.subheader] == []
    assert len(at.button) == 1
    assert at.button[0].label == "Analyze Emotion"
    assert at.button[0].disabled
    assert len(at.error) == 0


def test_error_message_is_shown(controller):
    controller.state.error = INVALID_FILE_MESSAGE

    at = run_page(controller)

    assert [e.value for e in at.error] == [INVALID_FILE_MESSAGE]


def test_selected_file_enables_submit(controller, wav):
    controller.select_file(wav)

    at = run_page(controller)

    assert not at.button[0].disabled
    assert any(c.value == "Selected: call.wav" for c in at.caption)


def test_submit_renders_sections_in_order(controller, session, wav):
    controller.select_file(wav)
    at = run_page(controller)

    at.button[0].click().run()

    assert not at.exception
    assert len(session.calls) == 1
    assert [s.value for s in at.subheader] == SECTIONS
    assert controller.state.is_loading is False


def test_result_sections_and_values(controller):
    controller.state.result = EmotionResult.model_validate(SAMPLE_RESULT)

    at = run_page(controller)

    assert [s.value for s in at.subheader] == SECTIONS
    markdown = [m.value for m in at.markdown]
    assert any("Duration: 12.35s" in m for m in markdown)
    assert any("42.5%" in m for m in markdown)
    assert any("57.5%" in m for m in markdown)
    assert any("88.1%" in m for m in markdown)
    # one play control per clip: the original plus each segment
    labels = [b.label for b in at.button[1:]]
    assert labels == ["▶ Play"] * 3


def test_service_supplied_names_are_escaped(controller):
    controller.state.result = EmotionResult.model_validate(
        {**SAMPLE_RESULT, "original_file": "<i>call</i>.wav"}
    )

    at = run_page(controller)

    markdown = [m.value for m in at.markdown]
    assert "**&lt;i&gt;call&lt;/i&gt;.wav**" in markdown
    assert not any("<i>call</i>" in m for m in markdown)
