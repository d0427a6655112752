"""End-to-end runs of the graph pipeline against fake rrdtool/ssh/scp."""

import pytest

from cgg.config import GraphConfig
from cgg.errors import MissingDataFile, NoMatchingMetrics, RenderFailed, TooManySeries
from cgg.graph_args import parse_draw_instruction
from cgg.plugins import build_plugins
from cgg.rrd import run_graphs


def make_config(input_dir, output, **plugin_options) -> GraphConfig:
    plugin_names = plugin_options.pop("plugins", ["processes"])
    return GraphConfig(
        input=str(input_dir),
        output=str(output),
        width=800,
        height=600,
        start=1_700_000_000,
        end=1_700_003_600,
        plugins=tuple(build_plugins(plugin_names, **plugin_options)),
    )


@pytest.mark.integration
class TestLocalPipeline:
    """Local collectd directory."""

    def test_single_image(self, populated_collectd, fake_tools, tmp_path):
        out = tmp_path / "out.png"

        saved = run_graphs(make_config(populated_collectd, out))

        assert saved == [str(out)]
        assert out.read_text() == "PNG"
        (call,) = fake_tools["calls"]()
        assert call[:10] == [
            "graph", str(out),
            "-w", "800", "-h", "600",
            "--start", "1700000000", "--end", "1700003600",
        ]
        legends = [parse_draw_instruction(*call[i:i + 2]).legend for i in range(10, len(call), 2)]
        assert legends == ["chrome", "dolphin", "firefox", "rust language server", "vscode"]

    def test_split_images_then_memory(self, populated_collectd, fake_tools, tmp_path):
        out = tmp_path / "graphs" / "out.png"

        saved = run_graphs(make_config(
            populated_collectd,
            out,
            plugins=["processes", "memory"],
            max_processes=2,
            memory=["used", "cached"],
        ))

        expected = [tmp_path / "graphs" / f"out_{i}.png" for i in range(1, 5)]
        assert saved == [str(p) for p in expected]
        assert all(p.read_text() == "PNG" for p in expected)
        memory_call = fake_tools["calls"]()[3]
        assert memory_call[10:] == [
            f"DEF:used={populated_collectd}/memory/memory-used.rrd:value:AVERAGE",
            'LINE5:used#e6194b:"used"',
            f"DEF:cached={populated_collectd}/memory/memory-cached.rrd:value:AVERAGE",
            'LINE5:cached#3cb44b:"cached"',
        ]

    def test_renderer_failure_keeps_earlier_images(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes("aaa", "bbb", "zzzFAIL")
        out = tmp_path / "out.png"

        with pytest.raises(RenderFailed) as exc_info:
            run_graphs(make_config(host_dir, out, max_processes=1))

        assert exc_info.value.context == ["image 3 of 3"]
        assert "No such file" in exc_info.value.result.stderr
        assert (tmp_path / "out_1.png").exists()
        assert (tmp_path / "out_2.png").exists()
        assert not (tmp_path / "out_3.png").exists()
        assert len(fake_tools["calls"]()) == 3

    def test_missing_memory_file(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes("firefox")

        with pytest.raises(MissingDataFile) as exc_info:
            run_graphs(make_config(host_dir, tmp_path / "out.png", plugins=["memory"]))

        assert exc_info.value.context == ["memory plugin"]
        assert fake_tools["calls"]() == []

    def test_too_many_processes_fails_before_rendering(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes(*[f"proc{i:02d}" for i in range(20)])

        with pytest.raises(TooManySeries):
            run_graphs(make_config(host_dir, tmp_path / "out.png", max_processes=5))

        assert fake_tools["calls"]() == []

    def test_nothing_found(self, collectd_dir, fake_tools, tmp_path):
        with pytest.raises(NoMatchingMetrics):
            run_graphs(make_config(collectd_dir, tmp_path / "out.png"))


@pytest.mark.integration
class TestRemotePipeline:
    """user@host:path locators through the fake ssh/scp."""

    def test_images_copied_back(self, populated_collectd, fake_tools, tmp_path):
        out = tmp_path / "local" / "out.png"
        locator = f"me@localhost:{populated_collectd}"

        saved = run_graphs(make_config(locator, out, max_processes=3))

        expected = [tmp_path / "local" / "out_1.png", tmp_path / "local" / "out_2.png"]
        assert saved == [str(p) for p in expected]
        assert all(p.read_text() == "PNG" for p in expected)
        # scratch file on the "remote" side is left in place
        assert fake_tools["scratch"].exists()

    def test_quoted_paths_survive_remote_shell(self, populated_collectd, fake_tools, tmp_path):
        locator = f"me@localhost:{populated_collectd}"

        run_graphs(make_config(
            locator, tmp_path / "out.png", processes=["rust language server"]
        ))

        (call,) = fake_tools["calls"]()
        assert call[1] == str(fake_tools["scratch"])
        assert call[10:] == [
            f"DEF:rust={populated_collectd}/processes-rust language server/ps_rss.rrd:value:AVERAGE",
            "LINE3:rust#e6194b:rust language server",
        ]

    def test_remote_memory_check(self, make_processes, make_memory, fake_tools, tmp_path):
        host_dir = make_processes("firefox")
        make_memory("used")

        with pytest.raises(MissingDataFile):
            run_graphs(make_config(
                f"me@localhost:{host_dir}", tmp_path / "out.png", plugins=["memory"]
            ))

    def test_remote_memory_directory_missing(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes("firefox")

        with pytest.raises(MissingDataFile) as exc_info:
            run_graphs(make_config(
                f"me@localhost:{host_dir}", tmp_path / "out.png", plugins=["memory"]
            ))

        assert exc_info.value.context == ["memory plugin"]
        assert fake_tools["calls"]() == []

    def test_remote_ignores_files_named_like_processes(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes("firefox")
        (host_dir / "processes-notes.txt").write_text("not a directory")

        saved = run_graphs(make_config(f"me@localhost:{host_dir}", tmp_path / "out.png"))

        assert saved == [str(tmp_path / "out.png")]
        (call,) = fake_tools["calls"]()
        assert call[10:] == [
            f"DEF:firefox={host_dir}/processes-firefox/ps_rss.rrd:value:AVERAGE",
            "LINE3:firefox#e6194b:firefox",
        ]

    def test_remote_missing_rss_fails_before_rendering(self, make_processes, fake_tools, tmp_path):
        host_dir = make_processes("firefox")
        (host_dir / "processes-chrome").mkdir()

        with pytest.raises(MissingDataFile) as exc_info:
            run_graphs(make_config(f"me@localhost:{host_dir}", tmp_path / "out.png"))

        assert exc_info.value.context == ["processes plugin"]
        assert fake_tools["calls"]() == []
