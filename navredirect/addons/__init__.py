from navredirect.addons import alarms
from navredirect.addons import cleanup
from navredirect.addons import loopguard
from navredirect.addons import redirector
from navredirect.addons import rulestore


def default_addons():
    return [
        alarms.Alarms(),
        loopguard.LoopGuard(),
        rulestore.RuleStore(),
        redirector.Redirector(),
        cleanup.Cleanup(),
    ]
