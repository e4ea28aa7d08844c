from jobtracker.core.pipeline import PipelineConfig
from jobtracker.types import ACTIVE_LABELS, INACTIVE_LABELS


def test_default_uses_fixed_labels() -> None:
    config = PipelineConfig.default()
    assert config.active == list(ACTIVE_LABELS)
    assert config.inactive == list(INACTIVE_LABELS)
    assert config.category_of("offer") == "active"
    assert config.category_of("rejected") == "inactive"
    assert config.category_of("unknown") is None


def test_add_labels_trims_and_dedupes() -> None:
    config = PipelineConfig.default()
    assert config.add_active_status("  final round  ").is_ok()
    assert config.add_active_status("final round").is_ok()
    assert config.active.count("final round") == 1
    assert config.add_inactive_status("withdrew").is_ok()
    assert config.inactive[-1] == "withdrew"
    assert config.add_active_status("   ").is_err()


def test_remove_label() -> None:
    config = PipelineConfig(active=["applied", "offer"], inactive=["rejected"])
    assert config.remove_status("offer").is_ok()
    assert config.active == ["applied"]
    assert config.remove_status("not there").is_ok()
    assert config.remove_status("applied").unwrap_err().field == "active"
    assert config.remove_status("rejected").unwrap_err().field == "inactive"
    assert config.to_data() == {"active": ["applied"], "inactive": ["rejected"]}


def test_from_data_validates_shape() -> None:
    loaded = PipelineConfig.from_data({"active": [" applied ", "applied", "offer"], "inactive": ["rejected"]})
    assert loaded.unwrap().active == ["applied", "offer"]
    assert PipelineConfig.from_data({"active": "applied", "inactive": ["rejected"]}).is_err()
    assert PipelineConfig.from_data({"active": [], "inactive": ["rejected"]}).is_err()
    assert PipelineConfig.from_data({"active": ["applied"]}).is_err()


def test_status_options_leave_out_display_only_labels() -> None:
    config = PipelineConfig.default()
    config.add_active_status("final round").unwrap()
    config.add_inactive_status("ghosted").unwrap()

    options = config.status_options()
    assert "final round" in config.active
    assert "final round" not in options["active"]
    assert "ghosted" not in options["inactive"]
    assert options == {"active": list(ACTIVE_LABELS), "inactive": list(INACTIVE_LABELS)}
