def _function(name: str, inputs: list[tuple[str, str]], outputs: list[str], mutability: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg, "type": arg_type} for arg, arg_type in inputs],
        "outputs": [{"name": "", "type": out_type} for out_type in outputs],
        "stateMutability": mutability,
    }


def _event(name: str, inputs: list[tuple[str, str, bool]]) -> dict:
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [
            {"name": arg, "type": arg_type, "indexed": indexed}
            for arg, arg_type, indexed in inputs
        ],
    }


ERC20_ABI: list[dict] = [
    # read-only
    _function("balanceOf", [("owner", "address")], ["uint256"], "view"),
    _function("decimals", [], ["uint8"], "view"),
    _function("symbol", [], ["string"], "view"),
    _function("name", [], ["string"], "view"),
    _function("totalSupply", [], ["uint256"], "view"),
    _function("allowance", [("owner", "address"), ("spender", "address")], ["uint256"], "view"),
    # state-changing
    _function("transfer", [("to", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _function("approve", [("spender", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _function(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("amount", "uint256")],
        ["bool"],
        "nonpayable",
    ),
    _event("Transfer", [("from", "address", True), ("to", "address", True), ("value", "uint256", False)]),
    _event("Approval", [("owner", "address", True), ("spender", "address", True), ("value", "uint256", False)]),
]
