from __future__ import annotations
from typing import Optional
import csv
import logging
import os
import time

import config

log = logging.getLogger(__name__)


class TrafficRecorder:
    """
    Taps the hub-level events of a node and writes one CSV row per event.

    Attach it to a Scope to record only while that scope lives: destroying
    the scope removes the recorder's listeners together with the scope's own.

    Columns (config.TRAFFIC_LOG_FIELDS):
      seq, time_s, event, topic, subscription_id, argc
    """

    def __init__(self, node, log_path: Optional[str] = None) -> None:
        self.node = node
        self.log_path = log_path or config.TRAFFIC_LOG_PATH
        self.rows_written: int = 0
        self._t0 = time.perf_counter()

        log_dir = os.path.dirname(self.log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        self.log_file = open(self.log_path, "w", newline="", encoding="utf-8")
        self.log_writer = csv.writer(self.log_file)
        self.log_writer.writerow(config.TRAFFIC_LOG_FIELDS)

        try:
            node.on(config.EVENT_MESSAGE, self._on_message)
            node.on(config.EVENT_NEW_TOPIC, self._on_new_topic)
            node.on(config.EVENT_CANCEL, self._on_cancel)
        except Exception:
            self.close()
            raise
        log.debug("recording %r traffic to %s", node, self.log_path)

    def __enter__(self) -> "TrafficRecorder":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self.log_file is None

    # ---- listeners -------------------------------------------------------

    def _on_message(self, topic, *args) -> None:
        self._write(config.EVENT_MESSAGE, topic, "", len(args))

    def _on_new_topic(self, topic, sub=None) -> None:
        self._write(config.EVENT_NEW_TOPIC, topic, sub.id if sub is not None else "", 0)

    def _on_cancel(self, sub) -> None:
        self._write(config.EVENT_CANCEL, sub.topic, sub.id, 0)

    def _write(self, event: str, topic, sub_id, argc: int) -> None:
        if self.log_writer is None:
            return
        self.rows_written += 1
        self.log_writer.writerow([
            self.rows_written,
            f"{time.perf_counter() - self._t0:.6f}",
            event,
            topic,
            sub_id,
            argc,
        ])

    def close(self) -> None:
        if self.log_file is None:
            return
        if not getattr(self.node, "destroyed", False):
            self.node.off(config.EVENT_MESSAGE, self._on_message)
            self.node.off(config.EVENT_NEW_TOPIC, self._on_new_topic)
            self.node.off(config.EVENT_CANCEL, self._on_cancel)
        self.log_file.close()
        self.log_file = None
        self.log_writer = None
