from jobtracker.core.pipeline import PipelineConfig


def test_pipeline_service_persists_changes(memory_container) -> None:
    service = memory_container.pipeline
    assert service.get().unwrap() == PipelineConfig.default()

    assert "final round" in service.add_active_status("final round").unwrap().active
    assert "withdrew" in service.add_inactive_status("withdrew").unwrap().inactive
    assert "final round" in service.get().unwrap().active

    assert "offer" not in service.remove_status("offer").unwrap().active
    assert service.add_active_status("").unwrap_err() == "active: label must not be empty"


def test_pipeline_service_refuses_to_empty_a_category(memory_container) -> None:
    service = memory_container.pipeline
    assert service.update(PipelineConfig(active=["applied"], inactive=["rejected"])).is_ok()
    assert service.remove_status("applied").unwrap_err() == "active: cannot remove the last active label"
    assert service.get().unwrap().active == ["applied"]


def test_job_board_service_register_and_resolve(memory_container) -> None:
    boards = memory_container.boards
    assert boards.list_boards().unwrap() == []
    assert boards.seed().unwrap() == 8

    assert boards.resolve_for_url("https://www.linkedin.com/jobs/view/1").unwrap().name == "LinkedIn"
    assert boards.resolve_for_url("https://careers.acme.io/role/7").unwrap() is None
    assert boards.resolve_for_url("").unwrap() is None

    acme = boards.register("Acme Careers", "https://www.careers.acme.io/role/7").unwrap()
    assert acme.root_domain == "careers.acme.io"
    assert acme.domains == ["careers.acme.io", "www.careers.acme.io"]
    assert boards.register("Acme again", "careers.acme.io").unwrap().id == acme.id
    assert boards.resolve_for_url("https://careers.acme.io/role/8").unwrap().id == acme.id
    assert boards.register("Nothing", "   ").is_err()

    assert boards.delete(acme.id).is_ok()
    assert boards.delete(acme.id).unwrap_err() == f"job board not found: {acme.id}"
