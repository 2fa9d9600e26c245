import threading
import time
import unittest

from game import Handle, ManualScheduler, Scheduler, ThreadingScheduler, Ticker


class TestManualScheduler(unittest.TestCase):
    def test_given_delayed_callback_when_advancing_then_fires_once_at_due_time(self):
        clock = ManualScheduler()
        fired = []
        handle = clock.call_later(1.0, lambda: fired.append(clock.now))
        clock.advance(0.5)
        self.assertEqual(fired, [])
        self.assertTrue(handle.active)
        clock.advance(0.5)
        self.assertEqual(fired, [1.0])
        self.assertFalse(handle.active)
        clock.advance(10)
        self.assertEqual(fired, [1.0])
        self.assertEqual(clock.now, 11.0)

    def test_given_cancelled_callback_when_advancing_then_never_runs(self):
        clock = ManualScheduler()
        fired = []
        handle = clock.call_later(1.0, lambda: fired.append(1))
        handle.cancel()
        handle.cancel()  # idempotent
        clock.advance(5)
        self.assertEqual(fired, [])
        self.assertEqual(clock.pending(), 0)

    def test_given_recurring_callback_when_advancing_then_fires_per_interval_until_cancelled(self):
        clock = ManualScheduler()
        ticks = []
        handle = clock.call_every(1.0, lambda: ticks.append(clock.now))
        clock.advance(3.5)
        self.assertEqual(ticks, [1.0, 2.0, 3.0])
        handle.cancel()
        clock.advance(3)
        self.assertEqual(len(ticks), 3)

    def test_given_tasks_when_advancing_then_run_in_due_order_with_fifo_ties(self):
        clock = ManualScheduler()
        order = []
        clock.call_later(2.0, lambda: order.append("late"))
        clock.call_later(1.0, lambda: order.append("first"))
        clock.call_later(1.0, lambda: order.append("second"))
        clock.advance(2)
        self.assertEqual(order, ["first", "second", "late"])

    def test_given_callback_scheduling_more_work_when_advancing_then_due_work_runs_same_pass(self):
        clock = ManualScheduler()
        order = []

        def outer():
            order.append("outer")
            clock.call_later(0.5, lambda: order.append("inner"))

        clock.call_later(1.0, outer)
        clock.advance(2)
        self.assertEqual(order, ["outer", "inner"])

    def test_given_recurring_callback_raising_once_when_advancing_then_later_ticks_still_fire(self):
        clock = ManualScheduler()
        ticks = []

        def tick():
            ticks.append(clock.now)
            if len(ticks) == 1:
                raise RuntimeError("boom")

        handle = clock.call_every(1.0, tick)
        with self.assertRaises(RuntimeError):
            clock.advance(1)
        self.assertTrue(handle.active)
        self.assertEqual(clock.pending(), 1)
        clock.advance(5)
        self.assertEqual(ticks, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

    def test_given_bad_delays_when_scheduling_then_value_error(self):
        clock = ManualScheduler()
        with self.assertRaises(ValueError):
            clock.call_later(-1, lambda: None)
        with self.assertRaises(ValueError):
            clock.call_every(0, lambda: None)
        with self.assertRaises(ValueError):
            clock.advance(-1)


class TestSchedulerBase(unittest.TestCase):
    def test_given_subclass_missing_methods_when_constructed_then_type_error(self):
        class OnlyLater(Scheduler):
            def call_later(self, delay, callback):
                return Handle(callback)

        with self.assertRaises(TypeError):
            OnlyLater()
        with self.assertRaises(TypeError):
            Scheduler()


class TestTicker(unittest.TestCase):
    def test_given_running_ticker_when_started_again_then_only_one_tick_active(self):
        clock = ManualScheduler()
        count = []
        ticker = Ticker(clock, 1.0, lambda: count.append(1))
        ticker.start()
        ticker.start()
        ticker.start()
        self.assertTrue(ticker.running)
        clock.advance(3)
        self.assertEqual(len(count), 3)
        self.assertEqual(clock.pending(), 1)

    def test_given_ticker_when_stopped_then_no_more_ticks_and_stop_is_idempotent(self):
        clock = ManualScheduler()
        count = []
        ticker = Ticker(clock, 1.0, lambda: count.append(1))
        ticker.start()
        clock.advance(2)
        ticker.stop()
        ticker.stop()
        self.assertFalse(ticker.running)
        clock.advance(5)
        self.assertEqual(len(count), 2)

    def test_given_new_callback_when_restarted_then_replaces_old_one(self):
        clock = ManualScheduler()
        seen = []
        ticker = Ticker(clock, 1.0, lambda: seen.append("old"))
        ticker.start()
        ticker.start(lambda: seen.append("new"))
        clock.advance(1)
        self.assertEqual(seen, ["new"])


class TestThreadingScheduler(unittest.TestCase):
    def test_given_short_delay_when_waiting_then_callback_runs_on_timer_thread(self):
        done = threading.Event()
        ThreadingScheduler().call_later(0.01, done.set)
        self.assertTrue(done.wait(2.0))

    def test_given_cancelled_timer_when_waiting_then_callback_never_runs(self):
        fired = threading.Event()
        handle = ThreadingScheduler().call_later(0.2, fired.set)
        handle.cancel()
        self.assertFalse(handle.active)
        self.assertFalse(fired.wait(0.4))

    def test_given_recurring_timer_when_waiting_then_fires_repeatedly_until_cancelled(self):
        hits = []
        enough = threading.Event()

        def tick():
            hits.append(1)
            if len(hits) >= 3:
                enough.set()

        handle = ThreadingScheduler().call_every(0.01, tick)
        self.assertTrue(enough.wait(2.0))
        handle.cancel()
        self.assertFalse(handle.active)

    def test_given_slow_recurring_callback_when_running_then_fires_stay_on_interval_grid(self):
        stamps = []
        enough = threading.Event()

        def slow_tick():
            stamps.append(time.monotonic())
            time.sleep(0.06)
            if len(stamps) >= 5:
                enough.set()

        handle = ThreadingScheduler().call_every(0.1, slow_tick)
        self.assertTrue(enough.wait(5.0))
        handle.cancel()
        # Re-arming after each callback would space fires by at least 0.16s (0.64s over four gaps).
        self.assertLess(stamps[4] - stamps[0], 0.55)


if __name__ == '__main__':
    unittest.main(verbosity=2)
