from typing import Dict
from hubscope.hub import Hub
from hubscope.scope import Scope


def plugin_sandbox(hub: Hub) -> Dict[str, Scope]:
    # Core app listens on the hub directly; a plugin gets its own sandbox
    hub.subscribe("app.ready")
    hub.subscribe("user.login")

    plugin = hub.scope()
    plugin.subscribe("user.login")
    plugin.subscribe("plugin.settings.changed")
    plugin.on("cancel", lambda sub: print(f"[plugin] cancelled {sub!r}"))

    hub.publish("app.ready")
    plugin.publish("user.login", {"user": "alice"})
    return {"plugin": plugin}


def nested_widgets(hub: Hub) -> Dict[str, Scope]:
    page = hub.scope()
    sidebar = page.scope()
    chart = page.scope()
    tooltip = chart.scope()

    page.subscribe("route.changed")
    sidebar.subscribe("data.refresh")
    chart.subscribe("data.refresh")
    chart.subscribe("data.series.added")
    tooltip.subscribe("pointer.move")
    tooltip.subscribe("pointer.move")

    hub.publish("data.refresh", {"rows": 120})
    tooltip.publish("pointer.move", (10, 42))
    return {"page": page, "sidebar": sidebar, "chart": chart, "tooltip": tooltip}


def subscription_churn(hub: Hub) -> Dict[str, Scope]:
    worker = hub.scope()

    # first three ticks only
    worker.subscribe("clock.tick").set_limit(3)
    # even ticks only
    worker.subscribe("clock.tick").set_filter(lambda n, _topic: n % 2 == 0)
    worker.subscribe("job.done")

    for n in range(6):
        hub.publish("clock.tick", n)
    worker.unsubscribe("job.done")
    hub.publish("job.done", "nobody listening")
    return {"worker": worker}


SCENARIOS = {
    "1": plugin_sandbox,
    "2": nested_widgets,
    "3": subscription_churn,
}
