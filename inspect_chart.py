#!/usr/bin/env python
import argparse
import logging
import pathlib
import sys

from tjaparser.classes.enums import Course
from tjaparser.classes.song import Song
from tjaparser.library import SONG_FILE_ENCODING, read_song_dir
from tjaparser.parser.tja import TJAParser


def read_song(path: pathlib.Path, encoding: str) -> Song:
    if path.is_dir():
        return read_song_dir(path, encoding)
    if path.suffix.lower() != ".tja":
        raise OSError("invalid file extension")
    with path.open("r", encoding=encoding) as f:
        return TJAParser().parse(f)


def print_song(song: Song, porcelain: bool) -> None:
    if porcelain:
        for course in Course:
            difficulty = song.get_difficulty(course)
            if difficulty is None:
                print("\t".join(["-1"] * 4))
                continue
            print(
                "\t".join(
                    str(n)
                    for n in [
                        difficulty.star_level,
                        len(difficulty.notes),
                        difficulty.hit_count,
                        f"{difficulty.length:.3f}",
                    ]
                )
            )
        return

    print(f"{song.title} ({song.bpm}bpm)")
    if song.subtitle:
        print(song.subtitle)
    print(f"AUDIO            | {song.audio_filename}")
    print(f"DEMO START       | {song.demo_start_offset:>8.3f}s")
    print(f"OFFSET           | {song.offset:>8.3f}s")
    for course in Course:
        difficulty = song.get_difficulty(course)
        if difficulty is None:
            continue
        print(f"===== {course.name:^8} =====")
        print(f"LEVEL            | {difficulty.star_level:>5}")
        print(f"NOTES            | {len(difficulty.notes):>5}")
        print(f"HITS             | {difficulty.hit_count:>5}")
        print(f"BIG NOTES        | {sum(1 for note in difficulty.notes if note.note_type.is_big):>5}")
        print(f"BARLINES         | {len(difficulty.barlines):>5}")
        print(f"LENGTH           | {difficulty.length:>8.3f}s")
        if song.get_difficulty(course, player_two=True) is not None:
            print("DOUBLE PLAY      |   yes")
    print()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Reads TJA files (or song directories) and prints out song info and per-course note counts."
    )
    parser.add_argument("filename", nargs="+", help="input TJA file(s) or song directories to read")
    parser.add_argument("--porcelain", action="store_true", help="produce machine readable output")
    parser.add_argument("--encoding", default=SONG_FILE_ENCODING, help="text encoding of the chart files")
    parser.add_argument("--log-level", action="store", help="change logging level. invalid values are silently ignored")
    args = parser.parse_args()

    log_level = logging.WARNING
    if args.log_level is not None:
        try:
            log_level_int = int(args.log_level)
            if log_level_int in logging._levelToName:
                log_level = log_level_int
        except ValueError:
            log_level_str = args.log_level.upper()
            log_level = logging._nameToLevel.get(log_level_str, log_level)
    logging.basicConfig(format="[%(levelname)s %(asctime)s] %(filename)s: %(message)s", level=log_level)

    for fn in args.filename:
        try:
            song = read_song(pathlib.Path(fn), args.encoding)
            if not args.porcelain:
                print(fn)
            print_song(song, args.porcelain)
        except Exception as err:
            if args.porcelain:
                for _ in Course:
                    print("\t".join(["-1"] * 4))
                continue
            print(f"{parser.prog}: {type(err).__name__}: {err}")
            print(f"{parser.prog}: error: unable to parse file, or no such file: {fn!r}")
            return 3

    return 0


if __name__ == "__main__":
    sys.exit(main())
