"""Rendering of decrypted secrets into user templates.

Jinja2::
    {% for s in list %}{{ s.name }}={{ s.secret }}
    {% endfor %}
    token: {{ map.api_token }}

Renderers only ever see the plaintext list, never the store itself.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Iterable

import jinja2

from .errors import TemplateError
from .schema import Secret

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}
_ESCAPE_RE = re.compile(r"\\([nt\\\"])")


def unescape(template: str) -> str:
    """Turn backslash escapes typed on a command line into characters."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], template)


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )


def render(template: str, secrets: Iterable[Secret]) -> str:
    """
    Render `template` with the given secrets.

    The template sees `list`, a list of `{name, secret}` mappings in store
    order, and `map`, a mapping of name to secret.
    """
    secrets = list(secrets)
    args = {
        "list": [{"name": s.name, "secret": s.secret} for s in secrets],
        "map": {s.name: s.secret for s in secrets},
    }
    try:
        return _environment().from_string(template).render(**args)
    except jinja2.TemplateError as e:
        raise TemplateError(f"rendering template: {e}") from e


def env_name(name: str) -> str:
    """Map a secret name to a shell variable name."""
    var = re.sub(r"\W", "_", name, flags=re.ASCII).upper()
    if not var or var[0].isdigit():
        var = f"_{var}"
    return var


def render_env(secrets: Iterable[Secret], interpreter: str | None = None) -> str:
    """Render a shell script exporting every secret as a variable."""
    lines = []
    if interpreter:
        lines.extend([f"#!{interpreter}", ""])
    for secret in secrets:
        lines.append(f"export {env_name(secret.name)}={shlex.quote(secret.secret)}")
    return "\n".join(lines)
