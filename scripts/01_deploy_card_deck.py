import sys

from scripts.card_deck import CONTRACT_NAME, MintRequest, run, verify_mints
from scripts.utils import BrownieRuntime, abort, deployment_config, with_deployed

MINT_REQUESTS = [
    MintRequest(1, "0x21373022272527af1283e01282b202d"),
    MintRequest(2, "0x21373022272527af3434847ef2d"),
]


def contract_name():
    return deployment_config().get("contract", CONTRACT_NAME)


def main():
    required_confs = deployment_config().get("required_confs", 1)
    try:
        run(
            BrownieRuntime(required_confs),
            MINT_REQUESTS,
            contract_name=contract_name(),
            required_confs=required_confs,
        )
    except Exception as ex:
        abort(ex)


def _verify(card_deck):
    mismatched = verify_mints(card_deck, MINT_REQUESTS)
    for request in mismatched:
        print(f"card {request.id}: stored proof differs from {request.proof}", file=sys.stderr)
    if mismatched:
        abort(f"{len(mismatched)} of {len(MINT_REQUESTS)} mints do not match")
    print(f"Verified {len(MINT_REQUESTS)} mints on {card_deck.address}")


def verify():
    with_deployed(contract_name())(_verify)()
