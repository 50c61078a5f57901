import io
import logging
import threading

from bgpgen.colorlog import CYAN, RED, RESET, CustomFormatter, Diagnostics


def test_error_report_layout():
    out = io.StringIO()
    diag = Diagnostics(stream=out, color=False)
    diag.header = "policy.pro"

    diag.error("route map does not exist")

    assert out.getvalue() == (
        "policy.pro\n\nError: route map does not exist\n" + "-" * 80 + "\n"
    )


def test_long_text_is_wrapped_after_label():
    diag = Diagnostics(stream=io.StringIO(), color=False)

    report = diag.warning("word " * 40)

    lines = report.splitlines()
    assert lines[1].startswith("Warning: word")
    assert lines[2].startswith(" " * len("Warning: ") + "word")
    assert all(len(line) <= 80 for line in lines)


def test_colored_labels():
    out = io.StringIO()
    diag = Diagnostics(stream=out)
    diag.header = "policy.pro"

    diag.error("bad")
    diag.failed()

    assert f"{CYAN}policy.pro{RESET}" in out.getvalue()
    assert f"{RED}Error: {RESET}bad" in out.getvalue()
    assert out.getvalue().endswith(f"{RED}failed\n{RESET}")


def test_reports_do_not_interleave():
    out = io.StringIO()
    diag = Diagnostics(stream=out, color=False)

    def worker(idx: int):
        for _ in range(20):
            diag.warning(f"message {idx}")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = out.getvalue().splitlines()
    assert len(lines) == 8 * 20 * 3
    for i in range(0, len(lines), 3):
        assert lines[i] == ""
        assert lines[i + 1].startswith("Warning: message ")
        assert lines[i + 2] == "-" * 80


def test_custom_formatter_colors_by_level():
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

    text = CustomFormatter().format(record)

    assert text.startswith(RED)
    assert "boom" in text
