"""Smoke test to verify the toolchain works."""


def test_import_splits_analysis():
    """Verify the splits_analysis package can be imported."""
    import splits_analysis

    assert splits_analysis is not None


def test_subpackages_importable():
    """Verify all subpackages can be imported."""
    import splits_analysis.analysis
    import splits_analysis.model
    import splits_analysis.reporting
    import splits_analysis.web.app

    assert splits_analysis.model is not None
    assert splits_analysis.analysis is not None
    assert splits_analysis.reporting is not None
    assert splits_analysis.web.app is not None
