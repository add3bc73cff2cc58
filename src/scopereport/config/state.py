# topmark:header:start
#
#   project      : ScopeReport
#   file         : state.py
#   file_relpath : src/scopereport/config/state.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Process-wide active configuration and default sink.

The configuration is resolved lazily on first use (see
[`load_config`][scopereport.config.io.load_config]) and can be replaced at any time
with [`configure`][scopereport.config.state.configure]. The default sink is derived
from the configuration unless one was installed explicitly.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from scopereport.config.io import load_config
from scopereport.config.logging import get_logger
from scopereport.rendering.color import resolve_color_mode
from scopereport.rendering.sinks import ConsoleSink
from scopereport.rendering.theme import Theme

if TYPE_CHECKING:
    from typing import TextIO

    from scopereport.config.logging import ScopereportLogger
    from scopereport.config.model import ReportConfig
    from scopereport.rendering.sinks import ReportSink

logger: ScopereportLogger = get_logger(__name__)

_lock = threading.Lock()
_config: ReportConfig | None = None
_sink: ReportSink | None = None


def get_config() -> ReportConfig:
    """Return the active configuration, loading it on first use."""
    global _config
    with _lock:
        if _config is None:
            _config = load_config()
            logger.debug("Loaded configuration: %s", _config)
        return _config


def configure(config: ReportConfig | None = None, *, sink: ReportSink | None = None) -> None:
    """Install a configuration and/or a default sink.

    Installing a configuration without a sink discards a previously derived default
    sink so the next report picks up the new settings.

    Args:
        config: New active configuration; None keeps the current one.
        sink: New default sink; None keeps (or re-derives) the current one.
    """
    global _config, _sink
    with _lock:
        if config is not None:
            _config = config
            if sink is None and isinstance(_sink, ConsoleSink):
                _sink = None
        if sink is not None:
            _sink = sink


def get_sink() -> ReportSink:
    """Return the default sink, deriving a `ConsoleSink` from the configuration if unset."""
    global _sink
    config = get_config()
    with _lock:
        if _sink is None:
            _sink = ConsoleSink(
                frame=config.frame,
                color=resolve_color_mode(color_mode_override=config.color),
            )
        return _sink


def set_sink(sink: ReportSink | None) -> ReportSink | None:
    """Replace the default sink and return the previous one (None re-derives it)."""
    global _sink
    with _lock:
        previous = _sink
        _sink = sink
        return previous


def _sink_stream(sink: ReportSink) -> TextIO | None:
    stream = getattr(sink, "out", None) or getattr(sink, "stream", None)
    return stream


def get_theme(sink: ReportSink) -> Theme:
    """Return the theme used when rendering to ``sink``.

    Color follows the configured `ColorMode`; in ``auto`` mode it depends on whether
    the sink's stream is a terminal (sinks without a stream are never colored).
    """
    config = get_config()
    stream = _sink_stream(sink)
    color = resolve_color_mode(
        color_mode_override=config.color,
        stream=stream,
        stream_isatty=False if stream is None else None,
    )
    return Theme(glyphs=config.glyphs.glyphs, color=color)


def reset() -> None:
    """Forget the active configuration and default sink."""
    global _config, _sink
    with _lock:
        _config = None
        _sink = None
