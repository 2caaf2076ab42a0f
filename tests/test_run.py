import json

from feedrank.run import main, run_feed

from conftest import NOW


def test_run_feed_ranks_fixture_viewer(sample_config, tmp_path):
    output = tmp_path / "out" / "feed.json"
    report = tmp_path / "out" / "report.json"

    result = run_feed(
        str(sample_config), "u-camille",
        output_path=str(output), report_path=str(report), now=NOW
    )

    assert result["success"]
    feed = json.loads(output.read_text())
    # p-3 author too old, p-4 wrong gender, p-6 is the viewer's own post
    assert [p["id"] for p in feed["posts"]] == ["p-1", "p-2", "p-5"]
    scores = [p["relevance_score"] for p in feed["posts"]]
    assert scores == sorted(scores, reverse=True)
    assert feed["posts"][2]["relevance_score"] == 45.0
    assert "breakdown" in feed["posts"][0]
    assert json.loads(report.read_text())["viewer_id"] == "u-camille"


def test_run_feed_limit(sample_config, tmp_path):
    output = tmp_path / "feed.json"
    run_feed(str(sample_config), "u-camille", output_path=str(output), limit=1, now=NOW)
    assert [p["id"] for p in json.loads(output.read_text())["posts"]] == ["p-1"]


def test_main_writes_output(sample_config, tmp_path):
    output = tmp_path / "feed.json"
    assert main(["--config", str(sample_config), "--viewer", "u-karim", "--output", str(output)]) == 0
    assert json.loads(output.read_text())["viewer_id"] == "u-karim"


def test_main_unknown_viewer_fails(sample_config):
    assert main(["--config", str(sample_config), "--viewer", "nobody"]) == 1


def test_main_prints_to_stdout(sample_config, capsys):
    assert main(["--config", str(sample_config), "--viewer", "u-lea"]) == 0
    feed = json.loads(capsys.readouterr().out)
    assert feed["viewer_id"] == "u-lea"


def test_run_feed_limit_with_empty_feed_section(sample_config, tmp_path):
    text = sample_config.read_text()
    start = text.index("feed:\n")
    sample_config.write_text(text[:start] + "feed:\n" + text[text.index("evaluation:\n"):])

    output = tmp_path / "feed.json"
    result = run_feed(str(sample_config), "u-camille", output_path=str(output), limit=1, now=NOW)
    assert result["success"]
    assert [p["id"] for p in json.loads(output.read_text())["posts"]] == ["p-1"]
