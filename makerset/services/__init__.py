# Services Module
# Submodules are imported directly (makerset.services.api, .money, .settings);
# makerset.models depends on .money, so nothing is re-exported here.
