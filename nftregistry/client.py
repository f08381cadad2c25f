from nftregistry.execution.executor import Executor
from nftregistry.db.driver import RegistryDriver
from nftregistry.registry.controller import Registry
from nftregistry.config import RegistryConfig
from functools import partial

from . import config


class RegistryClient:
    """
    Signer-bound access to one registry. Every exported registry operation is
    available as a method; keyword arguments are passed through, ``signer``
    and ``attached_value`` may be overridden per call. Failed calls raise the
    registry error.

        client = RegistryClient(signer='alice')
        client.initialize()
        record = client.mint(token_owner_id='bob', metadata={'title': 'X'})
        client.transfer(signer='bob', receiver_id='carol', token_id=record.token_id)
    """
    def __init__(self, signer='sys',
                 driver=None,
                 name=config.REGISTRY_NAME,
                 registry_config: RegistryConfig=None):

        self.raw_driver = driver if driver is not None else RegistryDriver()
        self.executor = Executor(driver=self.raw_driver, name=name, registry_config=registry_config)
        self.signer = signer
        self.name = name

        # set up virtual functions
        for func in Registry.MUTATIONS + Registry.VIEWS:
            setattr(self, func, partial(self._abstract_function_call, func=func))

    @property
    def registry(self):
        return self.executor.registry

    def _abstract_function_call(self, func, signer=None, attached_value=0, **kwargs):
        output = self.executor.execute(sender=signer or self.signer,
                                       function_name=func,
                                       kwargs=kwargs,
                                       attached_value=attached_value)

        if output['status_code'] == 1:
            raise output['result']

        return output['result']

    def keys(self):
        return self.raw_driver.get_registry_keys(self.name)

    def quick_read(self, variable, key=None, args=None):
        a = []

        if key is not None:
            a.append(key)

        if args is not None and isinstance(args, list):
            for arg in args:
                a.append(arg)

        k = self.raw_driver.make_key(registry=self.name, variable=variable, args=a)
        return self.raw_driver.get(k)

    def flush(self):
        self.raw_driver.flush()
