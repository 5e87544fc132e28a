from broker.main import start
from broker.services.config import BrokerConfig
from broker.services.user_provided_provisioner import UserProvidedProvisioner


def main() -> None:
    start(BrokerConfig.from_env(), UserProvidedProvisioner())


if __name__ == "__main__":
    main()
