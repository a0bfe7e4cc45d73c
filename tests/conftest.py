from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

import pytest

from scripts.card_deck import MintRequest

DEPLOYED_ADDRESS = "0xABC0000000000000000000000000000000000001"

PROOF_1 = "0x21373022272527af1283e01282b202d"
PROOF_2 = "0x21373022272527af3434847ef2d"

MINT_REQUESTS = [MintRequest(1, PROOF_1), MintRequest(2, PROOF_2)]


class Revert(Exception):
    pass


class FakeAccount:
    def __init__(self, address: str):
        self.address = address

    def __repr__(self):
        return f"<FakeAccount '{self.address}'>"


class Receipt(NamedTuple):
    fn_name: str
    args: tuple
    sender: FakeAccount
    required_confs: int


class FakeCardDeck:
    def __init__(self, address: str, calls: List[tuple], reject: Iterable[int] = ()):
        self.address = address
        self.calls = calls
        self.reject = set(reject)
        self.mints: Dict[int, str] = {}

    def mint(self, id, proof, tx_params):
        sender = tx_params["from"]
        self.calls.append(("mint", id, proof, sender.address))
        if id in self.reject or id in self.mints:
            raise Revert(f"mint {id} rejected")
        self.mints[id] = proof
        return Receipt("mint", (id, proof), sender, tx_params.get("required_confs", 1))

    def getMint(self, id):
        return self.mints.get(id, "0x")


class FakeContainer(list):
    """Stands in for a brownie contract container, a list of deployments."""

    def __init__(self, name: str):
        super().__init__()
        self.name = name


class FakeRuntime:
    def __init__(
        self,
        signers: Sequence[str] = ("0xSIGNER1",),
        address: str = DEPLOYED_ADDRESS,
        fail_deploy: Optional[Exception] = None,
        reject: Iterable[int] = (),
    ):
        self.signers = [FakeAccount(signer) for signer in signers]
        self.address = address
        self.fail_deploy = fail_deploy
        self.reject = reject
        self.calls: List[tuple] = []

    def get_contract_factory(self, name: str):
        self.calls.append(("get_contract_factory", name))
        return FakeContainer(name)

    def deploy(self, factory: FakeContainer) -> Any:
        self.calls.append(("deploy", factory.name))
        if self.fail_deploy is not None:
            raise self.fail_deploy
        card_deck = FakeCardDeck(self.address, self.calls, self.reject)
        factory.append(card_deck)
        return card_deck

    def get_signers(self):
        self.calls.append(("get_signers",))
        return list(self.signers)

    def mint_calls(self):
        return [call[1:] for call in self.calls if call[0] == "mint"]


@pytest.fixture
def runtime():
    return FakeRuntime()


@pytest.fixture
def make_runtime():
    def f(**kwargs):
        return FakeRuntime(**kwargs)

    return f
