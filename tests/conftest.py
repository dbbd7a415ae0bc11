import jax

# The accuracy checks compare against double-precision references.
jax.config.update("jax_enable_x64", True)

import gshtrans  # noqa: E402,F401  (load the package before any import hook is installed)
