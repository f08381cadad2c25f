from nftregistry.db.driver import RegistryDriver
from nftregistry.execution.runtime import CallContext
from nftregistry.registry.controller import Registry
from nftregistry.exceptions import RegistryError, StorageFailure
from nftregistry.config import RegistryConfig
from nftregistry import config
from nftregistry.logger import get_logger
from copy import deepcopy
import traceback

log = get_logger('Executor')


class Executor:
    def __init__(self, driver=None, name=config.REGISTRY_NAME, registry_config: RegistryConfig=None,
                 bypass_privates=False):

        self.driver = driver

        if not self.driver:
            self.driver = RegistryDriver()

        self.registry = Registry(driver=self.driver, name=name, registry_config=registry_config)

        self.bypass_privates = bypass_privates

    def execute(self, sender, function_name, kwargs=None,
                attached_value=0,
                auto_commit=True) -> dict:

        if not self.bypass_privates:
            assert not function_name.startswith(config.PRIVATE_METHOD_PREFIX), 'Private method not callable.'

        kwargs = kwargs or {}
        status_code = 0
        writes = {}

        try:
            if function_name in Registry.MUTATIONS:
                ctx = CallContext(caller=sender, attached_value=attached_value)
                result = getattr(self.registry, function_name)(ctx, **kwargs)
            elif function_name in Registry.VIEWS or self.bypass_privates:
                result = getattr(self.registry, function_name)(**kwargs)
            else:
                raise AttributeError("Registry has no exported function '{}'".format(function_name))

            writes = deepcopy(self.driver.pending_writes)

            if auto_commit:
                self.driver.commit()
        except StorageFailure as e:
            result = e
            status_code = 1
            log.error('{} for {} aborted by the store: {}'.format(function_name, sender, e))
            self.driver.clear_pending_state()
        except RegistryError as e:
            result = e
            status_code = 1
            log.warning('{} rejected for {}: {}'.format(function_name, sender, e))
            self.driver.clear_pending_state()
        except Exception as e:
            result = e
            status_code = 1
            log.error(str(e))
            log.error(traceback.format_exc())
            self.driver.clear_pending_state()

        output = {
            'status_code': status_code,
            'result': result,
            'writes': writes if status_code == 0 else {},
        }

        return output
