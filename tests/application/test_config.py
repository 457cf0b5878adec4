import pytest

from cyclograph.analysis.collector import KeyPolicy
from cyclograph.application import AnalysisConfig, ConfigError
from cyclograph.application.config import DEFAULT_REPORT_NAME


def test_defaults():
    config = AnalysisConfig()
    assert config.report_name == DEFAULT_REPORT_NAME == "complexity_results.txt"
    assert config.graph_format == "dot"
    assert config.key_policy is KeyPolicy.NAME
    assert config.descend_into_nested
    assert config.emit_graphs
    assert config.jobs == 1


def test_set_option_validates():
    config = AnalysisConfig()
    config.set_option("key_policy", "qualified")
    assert config.key_policy is KeyPolicy.QUALIFIED

    with pytest.raises(ConfigError):
        config.set_option("key_policy", "fuzzy")
    with pytest.raises(ConfigError):
        config.set_option("no_such_option", 1)
    with pytest.raises(ConfigError):
        config.set_option("jobs", 0)
    with pytest.raises(ConfigError):
        config.set_option("graph_format", ".dot")


def test_get_option():
    config = AnalysisConfig(jobs=4)
    assert config.get_option("jobs") == 4
    with pytest.raises(ConfigError):
        config.get_option("nope")


def test_from_mapping():
    config = AnalysisConfig.from_mapping({"output_dir": "out", "header_suffixes": ".pyi"})
    assert config.output_dir == "out"
    assert config.header_suffixes == (".pyi",)
    assert "descend_into_nested" in AnalysisConfig.option_names()


@pytest.mark.parametrize(
    "path, expected",
    [("pkg/mod.pyi", True), ("pkg/mod.py", False), (None, False), ("", False)],
)
def test_is_header(path, expected):
    assert AnalysisConfig().is_header(path) is expected
