"""
Counter example that renders into plain dicts.

Run with `python examples/counter.py`. Clicking is simulated by calling the
registered handlers directly.
"""
import logging

from rich import print

from hooklet import DictRenderer, EventLoopType, Hooklet, html, use_effect, use_state
from hooklet.renderers.dict_renderer import format_dict


def Counter(props):
    count, set_count = use_state(0)

    def log_count():
        print(f"[dim]effect: count is {count}[/dim]")

    use_effect(log_count, [count])

    return html(
        [
            "<counter>\n  <label text=\"Count: ",
            "\" />\n  <button onclick=",
            ">Bump</button>\n</counter>",
        ],
        count,
        lambda: set_count(lambda value: value + 1),
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    container = {"type": "root"}
    gui = Hooklet(renderer=DictRenderer(), event_loop_type=EventLoopType.SYNC)
    gui.mount(Counter, container)
    print(format_dict(container))

    for _ in range(2):
        button = container["children"][0]["children"][1]
        for handler in button["handlers"]["click"]:
            handler()
        print(format_dict(container))
