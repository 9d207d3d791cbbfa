"""
Base class for BizList server-rendered components.

Components are plain Python objects that render HTML strings. Every dynamic
value goes through `escape()`; attribute lists are built with `attributes()`
so boolean HTMX/ARIA flags stay consistent across components.
"""

from typing import Any, Optional
import html


class Component:
    """Base class for all UI components"""

    def render(self) -> str:
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[Any]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Join CSS classes, adding each keyword class whose value is true.

        Example:
            >>> Component.classes("star-button", starred=True, pending=False)
            'star-button starred'
        """
        classes = [c for c in args if c]
        classes.extend(key.replace("_", "-") for key, value in conditionals.items() if value)
        return " ".join(classes)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build an HTML attribute string.

        `hx_post` becomes `hx-post`, a trailing underscore is dropped
        (`class_` -> `class`), True renders a bare attribute and
        False/None omit it.

        Example:
            >>> Component.attributes(hx_post="/x", disabled=True, title=None)
            'hx-post="/x" disabled'
        """
        result = []
        for key, value in attrs.items():
            name = key[:-1] if key.endswith("_") else key.replace("_", "-")
            if value is True:
                result.append(name)
            elif value is not False and value is not None:
                result.append(f'{name}="{html.escape(str(value))}"')
        return " ".join(result)
