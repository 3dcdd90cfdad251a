import os
import unittest

from decimal import Decimal

from tjaparser.classes.base import TJASyntaxError
from tjaparser.classes.enums import NoteType, Player
from tjaparser.classes.items import (
    BarlineOff,
    BarlineOn,
    BPMChange,
    Command,
    Delay,
    End,
    EndMeasure,
    GogoEnd,
    GogoStart,
    Measure,
    Metadata,
    Notes,
    NoteTrack,
    Scroll,
    Start,
)
from tjaparser.parser.grammar import (
    end_command,
    inner_track_command,
    measure_end,
    metadata_pair,
    metadata_tagname,
    note_track,
    notes,
    preprocess_tja_file,
    start_command,
    tja_file,
)

DON, KAT = NoteType.DON, NoteType.KAT

SAMPLE_TRACK = """#START
1100,
1100,
2,
,
#END"""

SAMPLE_CHART = """TITLE: POP TEAM EPIC
BPM:142

WAVE:POP TEAM EPIC.ogg


#START

#GOGOSTART

1100,
1100,
2,
,

#END
"""


class TestPreprocess(unittest.TestCase):
    def test_strips_comments(self):
        self.assertEqual(preprocess_tja_file("TITLE:a // comment\nBPM:1"), "TITLE:a \nBPM:1")

    def test_keeps_line_endings(self):
        text = "// header\r\nTITLE:a\r\n//\r\n"
        self.assertEqual(preprocess_tja_file(text), "\r\nTITLE:a\r\n\r\n")

    def test_commented_out_line(self):
        self.assertEqual(preprocess_tja_file("//TITLE:a\nBPM:1\n"), "\nBPM:1\n")

    def test_byte_order_mark(self):
        self.assertEqual(preprocess_tja_file("\ufeffTITLE:a"), "TITLE:a")

    def test_no_comment(self):
        self.assertEqual(preprocess_tja_file("1010,\n"), "1010,\n")


class TestMetadata(unittest.TestCase):
    def test_tagname(self):
        self.assertEqual(metadata_tagname("TITLE:さいたま2000"), ("TITLE", ":さいたま2000"))
        self.assertEqual(metadata_tagname("EXAM1:something"), ("EXAM1", ":something"))

    def test_tagname_rejects(self):
        for text in [":value", "TITLE value", "title:value", ""]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    metadata_tagname(text)

    def test_pair_line_terminated(self):
        self.assertEqual(metadata_pair("TITLE:さいたま2000\n"), (("TITLE", "さいたま2000"), ""))
        self.assertEqual(metadata_pair("TITLE:POP TEAM EPIC\r\n"), (("TITLE", "POP TEAM EPIC"), ""))

    def test_pair_eof_terminated(self):
        self.assertEqual(metadata_pair("EXAM1:something"), (("EXAM1", "something"), ""))

    def test_pair_empty_value(self):
        self.assertEqual(metadata_pair("EMPTY:"), (("EMPTY", ""), ""))
        self.assertEqual(metadata_pair("EMPTY:\r\nBPM:1"), (("EMPTY", ""), "BPM:1"))

    def test_pair_leaves_following_lines(self):
        self.assertEqual(metadata_pair("BALLOON:10,20\nCOURSE:Easy\n"), (("BALLOON", "10,20"), "COURSE:Easy\n"))


class TestTrackCommands(unittest.TestCase):
    def test_start_with_player(self):
        self.assertEqual(
            start_command("\n#START P2\nsomethingsomething"), (Start(Player.PLAYER2), "somethingsomething")
        )
        self.assertEqual(
            start_command("\n#START P1\nsomethingsomething"), (Start(Player.PLAYER1), "somethingsomething")
        )
        self.assertEqual(start_command("#START P2\nrest"), (Start(Player.PLAYER2), "rest"))

    def test_start_without_player(self):
        self.assertEqual(start_command("#START"), (Start(None), ""))
        self.assertEqual(start_command("#START\r\n1,"), (Start(None), "1,"))

    def test_start_rejects(self):
        for text in ["#START ", "#END", "#START P3", "#START P1 extra", "#STARTP1"]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    start_command(text)

    def test_end(self):
        self.assertEqual(end_command("\n#END\n"), (End(), ""))
        self.assertEqual(end_command("#END"), (End(), ""))
        self.assertEqual(end_command("#END  \r\nTITLE:a"), (End(), "TITLE:a"))

    def test_end_rejects_arguments(self):
        with self.assertRaises(TJASyntaxError):
            end_command("\n#END P1")

    def test_inner_commands(self):
        self.assertEqual(inner_track_command("#GOGOSTART"), (GogoStart(), ""))
        self.assertEqual(inner_track_command("#GOGOEND\n1,"), (GogoEnd(), "1,"))
        self.assertEqual(inner_track_command("#BARLINEOFF"), (BarlineOff(), ""))
        self.assertEqual(inner_track_command("#BARLINEON"), (BarlineOn(), ""))

    def test_inner_command_rejects_arguments(self):
        with self.assertRaises(TJASyntaxError):
            inner_track_command("#GOGOSTART testvalue")

    def test_measure(self):
        self.assertEqual(inner_track_command("#MEASURE 5/4\n"), (Measure(5, 4), ""))

    def test_measure_rejects(self):
        for text in ["#MEASURE", "#MEASURE 5", "#MEASURE a/4", "#MEASURE 0/4", "#MEASURE 4/0", "#MEASURE 7.5/4"]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    inner_track_command(text)

    def test_numeric_commands(self):
        self.assertEqual(inner_track_command("#BPMCHANGE 180.5"), (BPMChange(Decimal("180.5")), ""))
        self.assertEqual(inner_track_command("#SCROLL 1.25"), (Scroll(Decimal("1.25")), ""))
        self.assertEqual(inner_track_command("#DELAY 0.5"), (Delay(Decimal("0.5")), ""))

    def test_numeric_commands_reject(self):
        for text in [
            "#BPMCHANGE",
            "#BPMCHANGE fast",
            "#BPMCHANGE 0",
            "#BPMCHANGE 1_20",
            "#BPMCHANGE 1e-999999",
            "#DELAY -1",
            "#SCROLL nan",
            "#SCROLL 1e3",
        ]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    inner_track_command(text)

    def test_unknown_commands(self):
        for text in ["#BRANCHSTART p,10,20", "#N", "#GOGOSTARTX", "#START", "#END"]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    inner_track_command(text)


class TestNotes(unittest.TestCase):
    def test_notes(self):
        self.assertEqual(
            notes("10201120,\n"),
            ((DON, None, KAT, None, DON, DON, KAT, None), ",\n"),
        )

    def test_every_digit_maps(self):
        group, rest = notes("0123456789")
        self.assertEqual(
            group,
            (
                None,
                NoteType.DON,
                NoteType.KAT,
                NoteType.BIG_DON,
                NoteType.BIG_KAT,
                NoteType.DRUMROLL_START,
                NoteType.BIG_DRUMROLL_START,
                NoteType.BALLOON_START,
                NoteType.ROLL_END,
                NoteType.BALLOON_START,
            ),
        )
        self.assertEqual(rest, "")

    def test_notes_without_comma(self):
        self.assertEqual(notes("11\n22,"), ((DON, DON), "\n22,"))

    def test_notes_reject(self):
        for text in ["", ",", "10a0,", "1 0,"]:
            with self.subTest(text=text):
                with self.assertRaises(TJASyntaxError):
                    notes(text)

    def test_measure_end(self):
        self.assertEqual(measure_end(" ,\n"), (EndMeasure(), "\n"))
        with self.assertRaises(TJASyntaxError):
            measure_end("1,")


class TestNoteTrack(unittest.TestCase):
    def test_note_track(self):
        self.assertEqual(
            note_track(SAMPLE_TRACK),
            (
                (
                    Command(Start(None)),
                    Notes((DON, DON, None, None)),
                    EndMeasure(),
                    Notes((DON, DON, None, None)),
                    EndMeasure(),
                    Notes((KAT,)),
                    EndMeasure(),
                    EndMeasure(),
                ),
                "",
            ),
        )

    def test_notes_split_across_lines(self):
        entries, _ = note_track("#START\n10\n20,\n#END\n")
        self.assertEqual(entries, (Command(Start(None)), Notes((DON, None)), Notes((KAT, None)), EndMeasure()))

    def test_several_measures_on_one_line(self):
        entries, _ = note_track("#START\n1,2,\n#END")
        self.assertEqual(entries, (Command(Start(None)), Notes((DON,)), EndMeasure(), Notes((KAT,)), EndMeasure()))

    def test_unclosed_track(self):
        with self.assertRaises(TJASyntaxError):
            note_track("#START\n1100,\n")

    def test_malformed_command_in_track(self):
        with self.assertRaises(TJASyntaxError):
            note_track("#START\n#GOGOSTART oops\n1,\n#END")


class TestTJAFile(unittest.TestCase):
    def test_item_list(self):
        self.assertEqual(
            tja_file(SAMPLE_CHART),
            (
                Metadata("TITLE", "POP TEAM EPIC"),
                Metadata("BPM", "142"),
                Metadata("WAVE", "POP TEAM EPIC.ogg"),
                NoteTrack(
                    (
                        Command(Start(None)),
                        Command(GogoStart()),
                        Notes((DON, DON, None, None)),
                        EndMeasure(),
                        Notes((DON, DON, None, None)),
                        EndMeasure(),
                        Notes((KAT,)),
                        EndMeasure(),
                        EndMeasure(),
                    )
                ),
            ),
        )

    def test_malformed_command_fails_whole_file(self):
        broken = SAMPLE_CHART.replace("#GOGOSTART", "#GOGOSTART oops this value shouldnt exist")
        with self.assertRaises(TJASyntaxError) as cm:
            tja_file(broken)
        self.assertEqual(cm.exception.line, 9)
        self.assertIsNone(cm.exception.rest)

    def test_unrecognized_line(self):
        with self.assertRaises(TJASyntaxError) as cm:
            tja_file("TITLE:a\nthis is not metadata\n")
        self.assertEqual(cm.exception.line, 2)

    def test_measure_command(self):
        self.assertEqual(
            tja_file("#START\n#MEASURE 5/4\n#END\n\n"),
            (NoteTrack((Command(Start(None)), Command(Measure(5, 4)))),),
        )

    def test_crlf(self):
        items = tja_file(SAMPLE_CHART.replace("\n", "\r\n"))
        self.assertEqual(items, tja_file(SAMPLE_CHART))

    def test_interleaved_items_keep_order(self):
        items = tja_file("COURSE:Easy\n#START\n1,\n#END\nCOURSE:Hard\n#START P1\n2,\n#END\n")
        self.assertEqual(
            [type(item) for item in items],
            [Metadata, NoteTrack, Metadata, NoteTrack],
        )
        self.assertEqual(items[3].entries[0], Command(Start(Player.PLAYER1)))

    def test_empty_source(self):
        self.assertEqual(tja_file(""), ())
        self.assertEqual(tja_file("\n\n  \n"), ())

    def test_real_chart(self):
        path = os.path.join(os.path.dirname(__file__), "data", "Ready To.tja")
        with open(path, "r", encoding="utf-8") as f:
            items = tja_file(preprocess_tja_file(f.read()))
        self.assertEqual(sum(isinstance(item, NoteTrack) for item in items), 4)


if __name__ == "__main__":
    unittest.main()
