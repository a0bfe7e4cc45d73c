import sys
from functools import lru_cache, wraps
from typing import Any, Dict, List, Union, cast

from brownie import accounts, config, network, project
from brownie.network.account import LocalAccount

DEV_CHAIN_IDS = {1337}
LIVE_DEPLOYERS = {137: "polygon-master"}


def deployment_config() -> Dict[str, Any]:
    return config.get("deployment") or {}


def is_live():
    return network.chain.id not in DEV_CHAIN_IDS


@lru_cache()
def get_deployer():
    if not is_live():
        return accounts[0]
    live_deployers = {**LIVE_DEPLOYERS, **deployment_config().get("live_accounts", {})}
    if network.chain.id in live_deployers:
        return cast(LocalAccount, accounts.load(live_deployers[network.chain.id]))
    raise ValueError(f"chain id {network.chain.id} not yet supported")


def get_container(name: str):
    loaded = project.get_loaded_projects()
    if not loaded:
        raise ValueError("no brownie project loaded")
    try:
        return getattr(loaded[0], name)
    except AttributeError:
        raise ValueError(f"contract {name} not found in project") from None


def abort(reason, code=1):
    print(f"error: {reason}", file=sys.stderr)
    sys.exit(code)


def with_deployed(Contract: Union[str, Any]):
    def wrapped(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if isinstance(Contract, str):
                name, container = Contract, get_container(Contract)
            else:
                name, container = Contract.deploy._name, Contract
            if len(container) == 0:
                abort(f"{name} not deployed")

            # most recent deployment
            contract = container[-1]
            result = f(contract, *args, **kwargs)
            return result

        return wrapper

    return wrapped


class BrownieRuntime:
    """Runtime backed by the active brownie network and loaded project."""

    def __init__(self, required_confs: int = 1):
        self.required_confs = required_confs

    def get_contract_factory(self, name: str):
        return get_container(name)

    def deploy(self, factory):
        return get_deployer().deploy(factory, required_confs=self.required_confs)

    def get_signers(self) -> List[Any]:
        """Returns the loaded accounts, with the deploying account first."""
        deployer = get_deployer()
        return [deployer] + [account for account in accounts if account is not deployer]
