import json
import os
import tempfile
import unittest

import httpx

from errors import EmptyRoster, InvalidSource, NoEligibleParticipants, SourceUnavailable
from models import Entrant
from services.denylist import KNOWN_BOTS, Denylist, default_denylist
from services.roster import Roster, RosterBuilder, color_from_name, parse_post_url


def replies_transport(authors, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if calls is not None:
            calls.append(body)
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": 1,
            "result": [{"author": a, "body": "me!"} for a in authors],
        })
    return httpx.MockTransport(handler)


class ParsePostUrlTests(unittest.TestCase):
    def test_hive_blog(self):
        self.assertEqual(parse_post_url("https://hive.blog/@alice/my-giveaway"), ("alice", "my-giveaway"))

    def test_peakd_with_community(self):
        self.assertEqual(parse_post_url("https://peakd.com/hive-12345/@bob.x/post-1"), ("bob.x", "post-1"))

    def test_bare_reference(self):
        self.assertEqual(parse_post_url("@carol/draw"), ("carol", "draw"))

    def test_malformed(self):
        for bad in ("", "https://hive.blog/alice/post", "@alice", "not a url"):
            with self.assertRaises(InvalidSource):
                parse_post_url(bad)


class ColorTests(unittest.TestCase):
    def test_known_value(self):
        # 31x string hash of "alice" = 92903040 = 0x05899680 -> low 24 bits
        self.assertEqual(color_from_name("alice"), "#899680")
        self.assertEqual(color_from_name("bob"), "#017DB5")

    def test_stable_and_shaped(self):
        for name in ("bob", "CryptoKnight", "żółw", "a" * 200, ""):
            c = color_from_name(name)
            self.assertEqual(c, color_from_name(name))
            self.assertRegex(c, r"^#[0-9A-F]{6}$")
        self.assertEqual(color_from_name(""), "#000000")


class FreeTextTests(unittest.TestCase):
    def setUp(self):
        self.builder = RosterBuilder()

    def test_trims_and_drops_blank_lines(self):
        roster = self.builder.from_text("  alice \n\n\tbob\n   \ncarol")
        self.assertEqual([e.display_name for e in roster], ["alice", "bob", "carol"])
        self.assertEqual(roster.source, "text")

    def test_scenario_b_repeats_are_kept(self):
        roster = self.builder.from_text("alice\nbob\n\nalice\n")
        # free text keeps the repeated name as its own entrant ...
        self.assertEqual([e.display_name for e in roster], ["alice", "bob", "alice"])
        # ... with a distinct identity so the roster invariant holds
        self.assertEqual(roster.identities(), ["alice", "bob", "alice#2"])
        self.assertEqual(roster[2].color, roster[0].color)

    def test_scenario_b_asymmetry_with_remote_mode(self):
        text_roster = self.builder.from_text("alice\nbob\n\nalice\n")
        remote_roster = self.builder.build(["alice", "bob", "alice"], exclude_automated=False)
        self.assertEqual(len(text_roster), 3)
        self.assertEqual(len(remote_roster), 2)
        self.assertEqual(remote_roster.identities(), ["alice", "bob"])

    def test_literal_numbered_name_does_not_collide(self):
        roster = self.builder.from_text("alice#2\nalice\nalice")
        ids = roster.identities()
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(ids, ["alice#2", "alice", "alice#3"])

    def test_avatar_and_defaults(self):
        e = self.builder.from_text("Mary Jane")[0]
        self.assertEqual(e.avatar, "https://api.dicebear.com/7.x/avataaars/svg?seed=Mary%20Jane")
        self.assertEqual(e.weight, 1)

    def test_bots_are_not_filtered_in_text_mode(self):
        roster = self.builder.from_text("hivebuzz\nalice")
        self.assertEqual(roster.identities(), ["hivebuzz", "alice"])

    def test_empty_text(self):
        for text in ("", "\n\n", "   \n\t"):
            with self.assertRaises(EmptyRoster):
                self.builder.from_text(text)


class BuildTests(unittest.TestCase):
    def setUp(self):
        self.builder = RosterBuilder(Denylist(["denylisted_bot"]))

    def test_scenario_c(self):
        roster = self.builder.build(["bob", "denylisted_bot", "bob", "carol"], exclude_automated=True)
        self.assertEqual(roster.identities(), ["bob", "carol"])
        self.assertEqual(roster[0].avatar, "https://images.hive.blog/u/bob/avatar")
        self.assertEqual(roster.source, "hive")

    def test_exclusion_off_keeps_bots(self):
        roster = self.builder.build(["bob", "denylisted_bot", "bob"], exclude_automated=False)
        self.assertEqual(roster.identities(), ["bob", "denylisted_bot"])

    def test_denylist_is_case_sensitive(self):
        roster = self.builder.build(["Denylisted_Bot"], exclude_automated=True)
        self.assertEqual(roster.identities(), ["Denylisted_Bot"])

    def test_all_bots_vs_nothing(self):
        with self.assertRaises(NoEligibleParticipants):
            self.builder.build(["denylisted_bot", "denylisted_bot"], exclude_automated=True)
        with self.assertRaises(EmptyRoster) as ctx:
            self.builder.build([], exclude_automated=True)
        self.assertNotIsInstance(ctx.exception, NoEligibleParticipants)

    def test_identities_unique(self):
        names = ["a", "b", "a", "c", "b", "b", "d"]
        ids = self.builder.build(names).identities()
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(ids, ["a", "b", "c", "d"])


class RosterTests(unittest.TestCase):
    def _e(self, name):
        return Entrant(identity=name, display_name=name, avatar="", color=color_from_name(name))

    def test_remove(self):
        roster = Roster([self._e("a"), self._e("b"), self._e("c")])
        self.assertTrue(roster.remove("b"))
        self.assertFalse(roster.remove("zzz"))
        self.assertEqual(roster.identities(), ["a", "c"])

    def test_snapshot_is_detached(self):
        roster = Roster([self._e("a"), self._e("b")])
        snap = roster.snapshot()
        roster.remove("a")
        self.assertEqual([e.identity for e in snap], ["a", "b"])

    def test_duplicate_identity_rejected(self):
        with self.assertRaises(ValueError):
            Roster([self._e("a"), self._e("a")])


class DenylistTests(unittest.TestCase):
    def test_default_contents(self):
        dl = Denylist()
        self.assertIn("hivebuzz", dl)
        self.assertNotIn("HiveBuzz", dl)
        self.assertEqual(len(dl), len(KNOWN_BOTS))

    def test_add_and_load(self):
        dl = Denylist([])
        self.assertTrue(dl.add("x"))
        self.assertFalse(dl.add("x"))
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "bots.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("# extra bots\nbot-one\n\n bot-two  # noisy\nx\n")
            self.assertEqual(dl.load(path), 2)
            self.assertEqual(dl.names(), ["x", "bot-one", "bot-two"])

            extended = default_denylist(path)
            self.assertIn("bot-one", extended)
            self.assertIn("ecency", extended)


class FromPostTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetches_replies_and_builds(self):
        calls = []
        builder = RosterBuilder(Denylist(["denylisted_bot"]), replies_url="https://node.test",
                                transport=replies_transport(["bob", "denylisted_bot", "bob", "carol"], calls))
        roster = await builder.from_post("https://peakd.com/@host/giveaway-1", exclude_automated=True)
        self.assertEqual(roster.identities(), ["bob", "carol"])
        self.assertEqual(calls[0]["method"], "condenser_api.get_content_replies")
        self.assertEqual(calls[0]["params"], ["host", "giveaway-1"])

    async def test_invalid_url_makes_no_request(self):
        calls = []
        builder = RosterBuilder(transport=replies_transport(["bob"], calls))
        with self.assertRaises(InvalidSource):
            await builder.from_post("https://hive.blog/trending")
        self.assertEqual(calls, [])

    async def test_no_replies(self):
        builder = RosterBuilder(replies_url="https://node.test", transport=replies_transport([]))
        with self.assertRaises(EmptyRoster):
            await builder.from_post("@host/post")

    async def test_provider_failures(self):
        responses = [
            httpx.Response(503, text="busy"),
            httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000}}),
            httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"not": "a list"}}),
            httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": [{"body": "no author"}]}),
            httpx.Response(200, text="<html>"),
        ]
        for resp in responses:
            builder = RosterBuilder(replies_url="https://node.test",
                                    transport=httpx.MockTransport(lambda req, r=resp: r))
            with self.assertRaises(SourceUnavailable):
                await builder.from_post("@host/post")

    async def test_network_error(self):
        def boom(request):
            raise httpx.ConnectError("down", request=request)
        builder = RosterBuilder(replies_url="https://node.test", transport=httpx.MockTransport(boom))
        with self.assertRaises(SourceUnavailable):
            await builder.from_post("@host/post")


if __name__ == "__main__":
    unittest.main()
