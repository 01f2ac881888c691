"""End-to-end asset lifecycle through the dispatcher."""

from ledgersafe import AssetContract, LedgerSettings, LocalDocumentStore, RetryingStore
from ledgersafe.storage import LocalStore, RetryPolicy


def test_lifecycle_over_retrying_store():
    """Create, transfer, query, and delete through a retry-wrapped store."""
    store = RetryingStore(LocalDocumentStore(), RetryPolicy(max_attempts=2, backoff="none"))
    contract = AssetContract(store, LedgerSettings(_env_file=None))

    for args in (
        ["asset1", "blue", "35", "tom"],
        ["asset2", "red", "50", "tom"],
        ["asset3", "blue", "70", "tom"],
    ):
        assert contract.invoke("initAsset", args).ok

    assert contract.invoke("transferAsset", ["asset2", "jerry"]).ok
    assert contract.invoke("transferAssetsBasedOnType", ["blue", "jerry"]).ok
    assert [r["Key"] for r in contract.invoke("queryAssetsByOwner", ["jerry"]).json()] == [
        "asset1",
        "asset2",
        "asset3",
    ]

    assert contract.invoke("delete", ["asset1"]).ok
    assert contract.invoke("readAsset", ["asset1"]).code == "not_found"
    assert [r["Key"] for r in contract.invoke("getAssetsByRange", ["", ""]).json()] == [
        "asset2",
        "asset3",
    ]
    assert list(contract.index.scan_by_type("blue")) == [("blue", "asset3")]


def test_key_value_only_backend_still_serves_range_and_history():
    contract = AssetContract(LocalStore(), LedgerSettings(_env_file=None))
    contract.invoke("initAsset", ["asset1", "blue", "35", "tom"])
    contract.invoke("transferAsset", ["asset1", "jerry"])

    history = contract.invoke("getHistoryForAsset", ["asset1"]).json()

    assert [entry["Value"]["owner"] for entry in history] == ["tom", "jerry"]
