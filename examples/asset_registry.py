"""Walk through every registry operation against an in-memory store.

Run with:
    python examples/asset_registry.py
"""

from ledgersafe import AssetContract, LedgerSettings, LocalDocumentStore, configure_logging

settings = LedgerSettings(log_level="WARNING")
configure_logging(settings)

contract = AssetContract(LocalDocumentStore(), settings)
contract.init()


def show(function: str, *args: str) -> None:
    response = contract.invoke(function, list(args))
    if response.ok:
        print(f"{function}{list(args)} -> {response.payload.decode() or 'OK'}")
    else:
        print(f"{function}{list(args)} !! {response.code}: {response.message}")


# Invoke
show("initAsset", "asset1", "blue", "35", "tom")
show("initAsset", "asset2", "red", "50", "tom")
show("initAsset", "asset3", "blue", "70", "tom")
show("initAsset", "asset1", "green", "10", "bob")  # conflict
show("transferAsset", "asset2", "jerry")
show("transferAssetsBasedOnType", "blue", "jerry")

# Query
show("readAsset", "asset1")
show("getAssetsByRange", "asset1", "asset3")
show("getAssetsByRangeWithPagination", "asset1", "asset4", "2", "")
show("getAssetsByRangeWithPagination", "asset1", "asset4", "2", "asset3")

# Rich query
show("queryAssetsByOwner", "tom")
show("queryAssets", '{"selector": {"owner": "jerry"}}')
show("queryAssetsWithPagination", '{"selector": {"owner": "jerry"}}', "2", "")

# Delete and inspect history
show("delete", "asset1")
show("readAsset", "asset1")  # not found
show("getHistoryForAsset", "asset1")
