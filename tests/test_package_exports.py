from __future__ import annotations


def test_data_lake_package_exports():
    import data_lake
    from data_lake import Storage, build_membership, reconstruct_membership
    from data_lake import membership as dl_membership
    from data_lake import storage as dl_storage

    assert Storage is dl_storage.Storage
    assert build_membership is dl_membership.build_membership
    assert reconstruct_membership is dl_membership.reconstruct_membership

    # Package-level __all__ should advertise the helpers for ``from data_lake import *``.
    exported = set(getattr(data_lake, "__all__", ()))
    assert {"Storage", "build_membership", "load_membership", "reconstruct_membership"}.issubset(exported)


def test_analysis_package_exports():
    import analysis
    from analysis import reshape, rolling, verbs

    assert analysis.pivot_longer is reshape.pivot_longer
    assert analysis.rolling_correlation is rolling.rolling_correlation
    assert analysis.mutate_at is verbs.mutate_at
    assert all(hasattr(analysis, name) for name in analysis.__all__)
