# ABOUTME: CSL style definitions carrying name-rendering directives in each supported location.
# ABOUTME: Used by style-config, engine, pipeline, and CLI tests.

CSL_NS = "http://purl.org/net/xbiblio/csl"


def style_with_pi(directive: str, summary: str | None = None) -> str:
    """A namespaced CSL style with a <?cne-config?> processing instruction in <info>."""
    summary_xml = f"<summary>{summary}</summary>" if summary is not None else ""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<style xmlns="{CSL_NS}" class="note" version="1.0">
  <info>
    <title>Chicago (parallel names)</title>
    <id>http://example.org/styles/chicago-parallel</id>
    <?cne-config {directive}?>
    {summary_xml}
  </info>
  <citation><layout><text variable="title"/></layout></citation>
</style>
"""


def style_with_summary(summary: str) -> str:
    """A namespaced CSL style whose directive lives in the <summary> text."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<style xmlns="{CSL_NS}" class="in-text" version="1.0">
  <info>
    <title>Author-date (parallel names)</title>
    <summary>{summary}</summary>
  </info>
  <citation><layout><text variable="title"/></layout></citation>
</style>
"""


PLAIN_STYLE = f"""<?xml version="1.0" encoding="utf-8"?>
<style xmlns="{CSL_NS}" class="in-text" version="1.0">
  <info>
    <title>Plain</title>
    <summary>A style without directives.</summary>
  </info>
</style>
"""

TRANSLIT_COMMA_STYLE = style_with_pi(
    '{"persons": ["translit"], "nameFormatting": {"romanizedCJK": '
    '{"order": "last-name-first", "separator": "comma"}}}'
)

TRANSLIT_SPACE_STYLE = style_with_pi(
    '{"persons": ["translit"], "nameFormatting": {"romanizedCJK": '
    '{"order": "last-name-first", "separator": "space"}}}'
)

ORIG_TRANSLIT_STYLE = style_with_pi('{"persons": ["orig", "translit"]}')
