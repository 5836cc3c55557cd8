"""Form markup: fields, classes and ARIA attributes over a parsed document.

A ``Form`` wraps one ``<form>`` element of a BeautifulSoup document. The
validator reads field values and attributes through it and writes its
state (classes, ``aria-*`` attributes, message elements) back into the same
tree, so ``Form.render()`` returns the page as it should be re-served.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from bs4 import BeautifulSoup, Tag

from formcheck.errors import MarkupError

FIELD_TAGS = ["input", "textarea", "select"]

# Controls that never take part in constraint validation
_BARRED_TYPES = frozenset({"submit", "button", "reset", "hidden", "image"})


def _root(element: Tag) -> Tag:
    node = element
    while node.parent is not None:
        node = node.parent
    return node


class Field:
    """One form control. Thin, stateless view over its tag."""

    __slots__ = ("form", "tag")

    def __init__(self, form: Form, tag: Tag) -> None:
        self.form = form
        self.tag = tag

    def __repr__(self) -> str:
        return f"<Field {self.tag.name} name={self.name!r} type={self.type!r}>"

    def __eq__(self, other: object) -> bool:
        # bs4 compares tags structurally; two identical inputs are still two fields
        return isinstance(other, Field) and other.tag is self.tag

    __hash__ = None  # type: ignore[assignment]

    # -- identity ---------------------------------------------------------

    @property
    def name(self) -> str:
        return str(self.tag.get("name") or "")

    @property
    def type(self) -> str:
        if self.tag.name == "input":
            return str(self.tag.get("type") or "text").lower()
        if self.tag.name == "select":
            return "select-multiple" if self.tag.has_attr("multiple") else "select-one"
        return self.tag.name

    @property
    def will_validate(self) -> bool:
        """False for unnamed, disabled, and button-like controls."""
        if not self.name or self.tag.has_attr("disabled"):
            return False
        return self.type not in _BARRED_TYPES

    # -- value ------------------------------------------------------------

    @property
    def checked(self) -> bool:
        return self.tag.has_attr("checked")

    @property
    def value(self) -> str:
        kind = self.type
        if kind == "checkbox":
            return str(self.tag.get("value") or "on") if self.checked else ""
        if kind == "radio":
            for other in self.group():
                if other.checked:
                    return str(other.tag.get("value") or "on")
            return ""
        if self.tag.name == "textarea":
            return self.tag.get_text()
        if self.tag.name == "select":
            options = self.tag.find_all("option")
            chosen = [o for o in options if o.has_attr("selected")]
            if not chosen and options and kind == "select-one":
                chosen = options[:1]
            return ",".join(_option_value(o) for o in chosen)
        return str(self.tag.get("value") or "")

    @value.setter
    def value(self, value: str) -> None:
        kind = self.type
        if kind == "checkbox":
            own = str(self.tag.get("value") or "on")
            self._set_checked(self.tag, value == own)
        elif kind == "radio":
            for other in self.group():
                self._set_checked(other.tag, value != "" and str(other.tag.get("value") or "on") == value)
        elif self.tag.name == "textarea":
            self.tag.string = value
        elif self.tag.name == "select":
            wanted = set(value.split(",")) if kind == "select-multiple" else {value}
            for option in self.tag.find_all("option"):
                self._set_checked(option, _option_value(option) in wanted, attribute="selected")
        else:
            self.tag["value"] = value

    @staticmethod
    def _set_checked(tag: Tag, on: bool, attribute: str = "checked") -> None:
        if on:
            tag[attribute] = ""
        elif tag.has_attr(attribute):
            del tag[attribute]

    def group(self) -> list[Field]:
        """Radio buttons sharing this field's name (just this field otherwise)."""
        if self.type != "radio":
            return [self]
        return [f for f in self.form.fields() if f.type == "radio" and f.name == self.name]

    # -- attributes -------------------------------------------------------

    def has(self, attribute: str) -> bool:
        return self.tag.has_attr(attribute)

    def get(self, attribute: str, default: str | None = None) -> str | None:
        raw = self.tag.get(attribute)
        if raw is None:
            return default
        if isinstance(raw, list):
            return " ".join(raw)
        return str(raw)

    def set(self, attribute: str, value: str = "") -> None:
        self.tag[attribute] = value

    def remove(self, attribute: str) -> None:
        if self.tag.has_attr(attribute):
            del self.tag[attribute]

    @property
    def classes(self) -> list[str]:
        raw = self.tag.get("class") or []
        return raw.split() if isinstance(raw, str) else list(raw)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, *names: str) -> None:
        classes = self.classes
        classes.extend(n for n in names if n not in classes)
        self.tag["class"] = classes

    def remove_class(self, *names: str) -> None:
        classes = [c for c in self.classes if c not in names]
        if classes:
            self.tag["class"] = classes
        else:
            self.remove("class")


def _option_value(option: Tag) -> str:
    raw = option.get("value")
    return str(raw) if raw is not None else option.get_text(strip=True)


class Form:
    """A ``<form>`` element and the document it lives in."""

    __slots__ = ("document", "element")

    def __init__(self, element: Tag) -> None:
        if element.name != "form":
            msg = f"Expected a <form> element, got <{element.name}>"
            raise MarkupError(msg)
        self.element = element
        self.document = _root(element)

    def __repr__(self) -> str:
        ident = self.element.get("id") or self.element.get("name") or ""
        return f"<Form {ident!r} fields={len(self.fields())}>"

    @classmethod
    def parse(cls, html: str, selector: str | None = None) -> Form:
        """Parse *html* and wrap its first form (or the one *selector* picks)."""
        soup = BeautifulSoup(html, "html.parser")
        return cls.from_document(soup, selector)

    @classmethod
    def from_document(cls, document: Tag, selector: str | None = None) -> Form:
        element = document.select_one(selector) if selector else document.find("form")
        if element is None:
            where = f" matching {selector!r}" if selector else ""
            msg = f"No <form>{where} in document"
            raise MarkupError(msg)
        return cls(element)

    @classmethod
    def of(cls, target: Form | Tag | str) -> Form:
        """Coerce a Form, a form tag, or an HTML string to a Form."""
        if isinstance(target, Form):
            return target
        if isinstance(target, str):
            return cls.parse(target)
        if target.name == "form":
            return cls(target)
        return cls.from_document(target)

    # -- fields -----------------------------------------------------------

    def fields(self) -> list[Field]:
        """Every control in document order."""
        return [Field(self, tag) for tag in self.element.find_all(FIELD_TAGS)]

    def validatable_fields(self) -> Iterator[Field]:
        """Controls that take part in validation, radio groups once."""
        seen_radio: set[str] = set()
        for field in self.fields():
            if not field.will_validate:
                continue
            if field.type == "radio":
                if field.name in seen_radio:
                    continue
                seen_radio.add(field.name)
            yield field

    def find(self, name: str) -> Field | None:
        tag = self.element.find(FIELD_TAGS, attrs={"name": name})
        return Field(self, tag) if tag is not None else None

    def field(self, name: str) -> Field:
        field = self.find(name)
        if field is None:
            msg = f"No field named {name!r} in form"
            raise MarkupError(msg)
        return field

    def values(self) -> dict[str, str]:
        """Current value of every named field (first control per name)."""
        values: dict[str, str] = {}
        for field in self.fields():
            if field.name and field.name not in values:
                values[field.name] = field.value
        return values

    def set_values(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.field(name).value = value

    # -- document helpers -------------------------------------------------

    def by_id(self, element_id: str) -> Tag | None:
        return self.document.find(id=element_id)

    def select_one(self, selector: str) -> Tag | None:
        return self.element.select_one(selector)

    def new_tag(self, tag_name: str, /, **attrs: str) -> Tag:
        factory = self.document if isinstance(self.document, BeautifulSoup) else BeautifulSoup("", "html.parser")
        return factory.new_tag(tag_name, attrs=attrs)

    def closest(self, field: Field, classes: Iterable[str]) -> Tag | None:
        """Nearest ancestor of *field* (inside the form) carrying one of *classes*."""
        wanted = set(classes)
        for parent in field.tag.parents:
            if parent is self.element:
                return None
            raw = parent.get("class") or []
            names = raw.split() if isinstance(raw, str) else raw
            if wanted.intersection(names):
                return parent
        return None

    def render(self) -> str:
        """The whole document, including validator state."""
        return str(self.document)
