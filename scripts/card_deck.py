from contextlib import contextmanager
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Protocol, Sequence

from eth_utils import is_0x_prefixed, is_hex, to_bytes

CONTRACT_NAME = "CardDeck"


class MintRequest(NamedTuple):
    id: int
    proof: str

    def check(self) -> "MintRequest":
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValueError(f"mint id must be a positive integer, got {self.id!r}")
        if (
            not isinstance(self.proof, str)
            or not is_0x_prefixed(self.proof)
            or len(self.proof) <= 2
            or not is_hex(self.proof)
        ):
            raise ValueError(f"mint proof must be a 0x-prefixed hex string, got {self.proof!r}")
        return self


class Runtime(Protocol):
    def get_contract_factory(self, name: str) -> Any:
        ...

    def deploy(self, factory: Any) -> Any:
        ...

    def get_signers(self) -> Sequence[Any]:
        ...


class DeployerState(Enum):
    UNDEPLOYED = "undeployed"
    DEPLOYING = "deploying"
    DEPLOYED_NO_SIGNER = "deployed_no_signer"
    READY = "ready"
    MINTING = "minting"
    DONE = "done"
    FAILED = "failed"


class Deployer:
    """Deploys a card deck contract and seeds it with mint transactions.

    ``card_deck`` and ``signer`` are each written once: the signer is only
    selected after the deployment is confirmed.
    """

    def __init__(self, runtime: Runtime, contract_name: str = CONTRACT_NAME, required_confs: int = 1):
        self.runtime = runtime
        self.contract_name = contract_name
        self.required_confs = required_confs
        self.card_deck: Optional[Any] = None
        self.signer: Optional[Any] = None
        self.state = DeployerState.UNDEPLOYED
        self.minting: Optional[int] = None
        self.receipts: List[Any] = []

    @contextmanager
    def _fail_on_error(self):
        try:
            yield
        except Exception:
            self.state = DeployerState.FAILED
            raise

    def deploy(self, requests: Sequence[MintRequest]) -> None:
        if self.state != DeployerState.UNDEPLOYED:
            raise RuntimeError(f"cannot deploy {self.contract_name} from state {self.state.value}")

        with self._fail_on_error():
            self.state = DeployerState.DEPLOYING
            factory = self.runtime.get_contract_factory(self.contract_name)
            self.card_deck = self.runtime.deploy(factory)
            print(f"Deployed to {self.card_deck.address}")
            self.state = DeployerState.DEPLOYED_NO_SIGNER

            # an empty signer list fails here, before anything is minted
            signers = self.runtime.get_signers()
            self.signer = signers[0]
            print("signer:", self.signer.address)
            self.state = DeployerState.READY

        self.mint(requests)

    def mint(self, requests: Sequence[MintRequest]) -> List[Any]:
        if self.state != DeployerState.READY or self.signer is None:
            raise RuntimeError(f"cannot mint on {self.contract_name} from state {self.state.value}")

        with self._fail_on_error():
            for request in requests:
                self.state = DeployerState.MINTING
                self.minting = request.id
                print(f"Minting card {request.id}..")
                tx = self.card_deck.mint(
                    request.id,
                    request.proof,
                    {"from": self.signer, "required_confs": self.required_confs},
                )
                self.receipts.append(tx)
                print(f"Minted card {request.id}")
            self.minting = None
            self.state = DeployerState.DONE
        return self.receipts


def run(
    runtime: Runtime,
    requests: Sequence[MintRequest],
    contract_name: str = CONTRACT_NAME,
    required_confs: int = 1,
) -> Deployer:
    requests = [MintRequest(*request).check() for request in requests]
    deployer = Deployer(runtime, contract_name, required_confs)
    deployer.deploy(requests)
    return deployer


def _as_bytes(value) -> bytes:
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    return bytes(value)


def verify_mints(card_deck, requests: Sequence[MintRequest]) -> List[MintRequest]:
    """Returns the requests whose proof stored on ``card_deck`` differs."""
    mismatched = []
    for request in requests:
        stored = card_deck.getMint(request.id)
        if _as_bytes(stored) != _as_bytes(request.proof):
            mismatched.append(request)
    return mismatched
