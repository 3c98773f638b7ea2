"""
Form field components.

Small wrappers that keep label, input, help and error markup consistent
across the login, company and profile forms.
"""

from typing import Optional, Sequence, Tuple

from ..base import Component


class FormField(Component):
    """Wrapper that renders label, input slot, help, and error text."""

    def __init__(
        self,
        field_id: str,
        label: str,
        *,
        required: bool = False,
        help_text: Optional[str] = None,
        error_text: Optional[str] = None,
    ) -> None:
        self.field_id = field_id
        self.label = label
        self.required = required
        self.help_text = help_text
        self.error_text = error_text

    def _aria(self) -> dict:
        return {
            "aria_describedby": f"{self.field_id}-help" if self.help_text else None,
            "aria_invalid": "true" if self.error_text else "false",
        }

    def render(self, input_html: str) -> str:
        required_marker = (
            '<span class="form-required" aria-hidden="true">*</span>'
            if self.required
            else ""
        )
        help_html = (
            f'<p class="form-help" id="{self.field_id}-help">{self.escape(self.help_text)}</p>'
            if self.help_text
            else ""
        )
        error_html = (
            f'<p class="form-error" role="alert" id="{self.field_id}-error">{self.escape(self.error_text)}</p>'
            if self.error_text
            else ""
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")
        return (
            f'<div class="{self.classes("form-field", form_field__error=bool(self.error_text))}">'
            f"<label {label_attrs}>"
            f"{self.escape(self.label)}{required_marker}"
            "</label>"
            f"{input_html}"
            f"{help_html}"
            f"{error_html}"
            "</div>"
        )


class TextInputField(FormField):
    """Single-line input ('text', 'email', 'password', 'date', 'url', 'search')."""

    def render(
        self,
        *,
        value: str = "",
        input_type: str = "text",
        autocomplete: Optional[str] = None,
        placeholder: Optional[str] = None,
        **attrs: str,
    ) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type=input_type,
            value=value if input_type != "password" else None,
            autocomplete=autocomplete,
            placeholder=placeholder,
            required=self.required,
            **self._aria(),
            **attrs,
        )
        return super().render(f"<input {input_attrs}>")


class TextAreaField(FormField):
    """Convenience helper for textareas."""

    def render(self, value: str = "", rows: int = 4, **attrs: str) -> str:
        textarea_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            rows=str(rows),
            required=self.required,
            **self._aria(),
            **attrs,
        )
        return super().render(f"<textarea {textarea_attrs}>{self.escape(value)}</textarea>")


class FileUploadField(FormField):
    """File upload control with consistent styling."""

    def render(self, accept: Optional[str] = None, **attrs: str) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type="file",
            accept=accept,
            required=self.required,
            **self._aria(),
            **attrs,
        )
        return super().render(f"<input {input_attrs}>")


class SelectField(FormField):
    """Drop-down with (value, label) options."""

    def render(self, options: Sequence[Tuple[str, str]], value: str = "", **attrs: str) -> str:
        opts = "".join(
            f'<option {self.attributes(value=v, selected=(v == value))}>{self.escape(label)}</option>'
            for v, label in options
        )
        select_attrs = self.attributes(id=self.field_id, name=self.field_id, required=self.required, **attrs)
        return super().render(f"<select {select_attrs}>{opts}</select>")


class SubmitButton(Component):
    def __init__(self, label: str, *, variant: str = "primary", name: Optional[str] = None, value: Optional[str] = None):
        self.label = label
        self.variant = variant
        self.name = name
        self.value = value

    def render(self) -> str:
        attrs = self.attributes(type="submit", class_=f"btn btn-{self.variant}", name=self.name, value=self.value)
        return f"<button {attrs}>{self.escape(self.label)}</button>"
