"""Systemwide statistics tracking, mostly for test and debug purposes."""

from prometheus_client import Gauge

class Stats:
    points_added: int = 0
    points_rejected: int = 0
    records_skipped: int = 0    # unparseable input records

    tiles_created: int = 0
    tiles_rendered: int = 0
    tiles_written: int = 0

    _prom_registered = False

    @classmethod
    def reset(cl):
        cl.points_added = cl.points_rejected = cl.records_skipped = 0
        cl.tiles_created = cl.tiles_rendered = cl.tiles_written = 0

    @classmethod
    def register_prom_callbacks(cl):
        """Register a gauge callback for every int member of this class.
        Safe to call more than once."""

        if cl._prom_registered:
            return

        def make_callback(attr_name):
            """Closure to capture the current attribute name in the for loop."""
            return lambda: getattr(Stats, attr_name)

        for name in dir(cl):
            if name.startswith('_') or not isinstance(getattr(cl, name), int):
                continue
            d = Gauge('mapheat_stat_' + name, name)
            d.set_function(make_callback(name))
        cl._prom_registered = True
