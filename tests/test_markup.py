"""Tests for formcheck.markup: Form and Field over parsed HTML."""

import pytest

from formcheck.errors import MarkupError
from formcheck.markup import Form

PAGE = """
<html><body>
<form id="upload">
  <input name="case_name" value="Smith v. Jones" class="form-control">
  <textarea name="notes">Line one</textarea>
  <select name="court">
    <option value="high">High Court</option>
    <option value="appeal" selected>Court of Appeal</option>
  </select>
  <input type="checkbox" name="agree" value="yes">
  <input type="radio" name="track" value="fast">
  <input type="radio" name="track" value="slow" checked>
  <input type="hidden" name="token" value="abc">
  <input name="locked" disabled>
  <input placeholder="no name">
  <button type="submit" name="go">Go</button>
</form>
</body></html>
"""


@pytest.fixture
def form() -> Form:
    return Form.parse(PAGE)


class TestForm:
    def test_parse_by_selector(self) -> None:
        html = '<form id="a"></form><form id="b"><input name="x"></form>'
        assert Form.parse(html, "#b").find("x") is not None

    def test_missing_form(self) -> None:
        with pytest.raises(MarkupError):
            Form.parse("<div></div>")

    def test_non_form_element(self) -> None:
        with pytest.raises(MarkupError):
            Form(Form.parse(PAGE).field("notes").tag)

    def test_of_accepts_string_and_form(self, form: Form) -> None:
        assert Form.of(form) is form
        assert Form.of(PAGE).find("notes") is not None

    def test_fields_in_document_order(self, form: Form) -> None:
        names = [f.name for f in form.fields()]
        assert names[:4] == ["case_name", "notes", "court", "agree"]

    def test_validatable_fields(self, form: Form) -> None:
        names = [f.name for f in form.validatable_fields()]
        assert names == ["case_name", "notes", "court", "agree", "track"]

    def test_unknown_field(self, form: Form) -> None:
        with pytest.raises(MarkupError):
            form.field("missing")

    def test_values(self, form: Form) -> None:
        values = form.values()
        assert values["case_name"] == "Smith v. Jones"
        assert values["notes"] == "Line one"
        assert values["court"] == "appeal"
        assert values["agree"] == ""
        assert values["track"] == "slow"


class TestFieldValues:
    def test_set_input(self, form: Form) -> None:
        form.field("case_name").value = "R v Brown"
        assert 'value="R v Brown"' in form.render()

    def test_set_textarea(self, form: Form) -> None:
        form.field("notes").value = "Changed"
        assert form.field("notes").value == "Changed"

    def test_set_select(self, form: Form) -> None:
        form.field("court").value = "high"
        assert form.field("court").value == "high"

    def test_select_defaults_to_first_option(self) -> None:
        form = Form.parse('<form><select name="s"><option>a</option><option>b</option></select></form>')
        assert form.field("s").value == "a"

    def test_checkbox(self, form: Form) -> None:
        agree = form.field("agree")
        agree.value = "yes"
        assert agree.checked
        assert agree.value == "yes"
        agree.value = ""
        assert not agree.checked

    def test_radio_group(self, form: Form) -> None:
        track = form.field("track")
        track.value = "fast"
        assert track.value == "fast"
        assert [f.checked for f in track.group()] == [True, False]


class TestFieldAttributes:
    def test_classes(self, form: Form) -> None:
        field = form.field("case_name")
        field.add_class("is-invalid", "form-control")
        assert field.classes == ["form-control", "is-invalid"]
        field.remove_class("is-invalid")
        assert field.classes == ["form-control"]

    def test_remove_last_class_drops_attribute(self, form: Form) -> None:
        field = form.field("notes")
        field.add_class("x")
        field.remove_class("x")
        assert not field.has("class")

    def test_set_and_remove(self, form: Form) -> None:
        field = form.field("notes")
        field.set("aria-invalid", "true")
        assert field.get("aria-invalid") == "true"
        field.remove("aria-invalid")
        assert field.get("aria-invalid") is None

    def test_equality_is_identity(self) -> None:
        form = Form.parse('<form><input name="a"><input name="a"></form>')
        first, second = form.fields()
        assert first != second
        assert first == form.field("a")

    def test_closest_container(self) -> None:
        form = Form.parse('<form><div class="mb-3"><label>x</label><input name="x"></div></form>')
        container = form.closest(form.field("x"), ["form-group", "mb-3"])
        assert container is not None
        assert container.name == "div"
