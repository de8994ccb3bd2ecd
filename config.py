# Global knobs (event names, traffic logging, CLI defaults)

# ---------------------------------------------------------------------
# Hub-level event names
#   message   : raw publish feed, args = (topic, *args)
#   new topic : one per subscribe call, args = (topic, subscription)
#   cancel    : one per cancelled subscription, args = (subscription,)
# ---------------------------------------------------------------------
EVENT_MESSAGE = "message"
EVENT_NEW_TOPIC = "new topic"
EVENT_CANCEL = "cancel"

HUB_EVENTS = (EVENT_MESSAGE, EVENT_NEW_TOPIC, EVENT_CANCEL)

# Subscription-level event names
SUB_EVENT_MESSAGE = "message"     # args = (payload, topic)
SUB_EVENT_CANCEL = "cancel"       # args = (subscription,)

# ---------------------------------------------------------------------
# Traffic log (TrafficRecorder -> analysis.py)
# ---------------------------------------------------------------------
TRAFFIC_LOG_PATH = "logs/traffic_log.csv"

TRAFFIC_LOG_FIELDS = [
    "seq",
    "time_s",
    "event",
    "topic",
    "subscription_id",
    "argc",
]

# ---------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------
LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

DEFAULT_SCENARIO = "1"
