"""Tests for render memoization and invalidation."""

from __future__ import annotations

from prowl.core.render_cache import RenderCache, RenderedLine


class _Renderer:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> RenderedLine:
        self.calls += 1
        return RenderedLine(spans=(("ProwlActiveTab", f"line {self.calls}"),))


def test_repeated_lookup_reuses_line() -> None:
    cache = RenderCache()
    render = _Renderer()

    first = cache.get_or_render("/a.py", 80, False, render)
    second = cache.get_or_render("/a.py", 80, False, render)

    assert first is second
    assert render.calls == 1
    assert cache.render_count == 1
    assert cache.generation == 0


def test_changed_inputs_trigger_recompute() -> None:
    cache = RenderCache()
    render = _Renderer()
    cache.get_or_render("/a.py", 80, False, render)

    cache.get_or_render("/a.py", 100, False, render)
    cache.get_or_render("/b.py", 100, False, render)
    line = cache.get_or_render("/b.py", 100, True, render)

    assert render.calls == 4
    assert line.text == "line 4"


def test_invalidate_bumps_generation_and_forces_recompute() -> None:
    cache = RenderCache()
    render = _Renderer()
    cache.get_or_render(None, 80, False, render)

    cache.invalidate()

    assert cache.generation == 1
    assert cache.line is None
    assert cache.lookup(None, 80, False) is None
    cache.get_or_render(None, 80, False, render)
    assert render.calls == 2


def test_rendered_line_joins_span_text() -> None:
    line = RenderedLine(spans=(("A", " q "), ("B", "main.py ")))

    assert line.text == " q main.py "
    assert bool(line) is True
    assert bool(RenderedLine()) is False
