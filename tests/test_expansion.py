"""
Tests for expanded (modal) editing.
"""

from RichContent.config import EngineSettings
from RichContent.editor import EditorController, EditorMode
from RichContent.expansion import ExpandedEditSession
from RichContent.surfaces import HeadlessSurface

SETTINGS = EngineSettings()


def _session(initial_value="", **kwargs):
    saved = []
    kwargs.setdefault("settings", SETTINGS)
    session = ExpandedEditSession(initial_value, saved.append, **kwargs)
    return session, saved


class TestSaveAndCancel:

    def test_confirm_hands_back_working_copy(self):
        session, saved = _session("one two")
        session.editor.handle_raw_input("one two three")

        assert session.confirm() == "one two three"
        assert saved == ["one two three"]
        assert not session.is_open

    def test_cancel_discards_working_copy(self):
        session, saved = _session("keep me")
        session.editor.handle_raw_input("changed")
        session.cancel()

        assert saved == []
        assert session.confirm() is None

    def test_confirm_mid_composition_flushes_composed_text(self):
        session, saved = _session(mode=EditorMode.PREVIEW)
        surface = session.editor.surface
        surface.focus()
        surface.start_composition()
        surface.update_composition("한")

        session.confirm()
        assert saved == ["한"]

    def test_from_editor_writes_back_on_confirm(self):
        editor = EditorController(HeadlessSurface(), initial_value="draft", settings=SETTINGS)
        session = ExpandedEditSession.from_editor(editor, title="Answer")
        session.editor.handle_raw_input("draft, expanded")

        assert editor.get_canonical_value() == "draft"
        session.confirm()
        assert editor.get_canonical_value() == "draft, expanded"

    def test_from_editor_cancel_leaves_editor_alone(self):
        editor = EditorController(HeadlessSurface(), initial_value="draft", settings=SETTINGS)
        changes = []
        editor.on_change(changes.append)
        session = ExpandedEditSession.from_editor(editor)
        session.editor.insert_math("\\pi")
        session.cancel()

        assert editor.get_canonical_value() == "draft"
        assert changes == []


class TestKeyboard:

    def test_ctrl_enter_saves(self):
        session, saved = _session("x")
        assert session.handle_key("Enter", ctrl=True) is True
        assert saved == ["x"]

    def test_plain_enter_is_not_handled(self):
        session, saved = _session("x")
        assert session.handle_key("Enter") is False
        assert session.is_open

    def test_escape_cancels(self):
        session, saved = _session("x")
        assert session.handle_key("Escape") is True
        assert not session.is_open
        assert saved == []

    def test_keys_ignored_once_closed(self):
        session, saved = _session("x")
        session.cancel()
        assert session.handle_key("Enter", ctrl=True) is False
        assert saved == []


class TestStatistics:

    def test_counts_use_visible_text(self):
        session, _ = _session("Total: <table><tr><td>12</td></tr></table> items")
        assert session.char_count == len("Total: 12 items")
        assert session.word_count == 3

    def test_empty_value(self):
        session, _ = _session()
        assert session.word_count == 0
        assert session.char_count == 0
        assert session.remaining_chars is None
        assert not session.is_near_limit
        assert not session.is_over_limit

    def test_length_limit(self):
        session, _ = _session("123456789", max_length=10)
        assert session.remaining_chars == 1
        assert not session.is_near_limit

        session.editor.handle_raw_input("1234567890")
        assert session.is_near_limit
        assert not session.is_over_limit

        session.editor.handle_raw_input("1234567890ab")
        assert session.remaining_chars == -2
        assert session.is_over_limit
