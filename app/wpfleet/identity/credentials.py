"""Extraction of constant values from wp-config.php.

Only literal declarations are recognised::

    define( 'DB_USER', 'md' );
    define("DB_USER", "md");

Computed values (getenv(), concatenation) are deliberately not evaluated.
"""

import re

_DEFINE_TEMPLATE = r"""define\s*\(\s*(['"]){name}\1\s*,\s*(['"])(?P<value>[^'"]*)\2\s*\)"""

# Line and block comments, so commented-out declarations are ignored
_COMMENT_RE = re.compile(r"/\*.*?\*/|(?m:^[ \t]*(?://|#)[^\n]*$)", re.DOTALL)


def extract_constant(contents: str, name: str) -> str | None:
    """Return the string literal bound to a constant by define().

    The first active declaration wins, mirroring PHP where redefining a
    constant has no effect.

    Args:
        contents: Text of a PHP configuration file.
        name: Constant name, e.g. ``DB_USER``.

    Returns:
        The literal value, or None if no literal declaration exists or
        the value is empty.
    """
    pattern = re.compile(_DEFINE_TEMPLATE.format(name=re.escape(name)))
    match = pattern.search(_COMMENT_RE.sub("", contents))
    if match is None:
        return None
    value = match.group("value").strip()
    return value or None
