# Copyright (C) 2022 Leiden University Medical Center
# This file is part of genomecount
#
# genomecount is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# genomecount is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with genomecount.  If not, see <https://www.gnu.org/licenses/

import argparse
import datetime
import functools
import io
import logging
import resource
import sys
import time
from typing import (IO, Any, Dict, Iterable, Iterator, List, Set,
                    Tuple)

import dnaio

import xopen

from ._dna import Sequence, Symbol, decode, to_string
from ._trie import NOT_FOUND, Trie, TrieNode

__all__ = [
    "NOT_FOUND",
    "QueryCoordinator",
    "QueryTooLongError",
    "Sequence",
    "Symbol",
    "Trie",
    "TrieNode",
    "WindowTooLongError",
    "count_queries",
    "decode",
    "scan",
    "to_string",
]

DEFAULT_MAX_WINDOW_LENGTH = 4096


class WindowTooLongError(ValueError):
    pass


class QueryTooLongError(WindowTooLongError):
    pass


class Timer:
    """Simple timer object to reduce timing boilerplate"""
    def __init__(self):
        self.start_time = time.time()

    def get_difference(self) -> datetime.timedelta:
        current_time = time.time()
        delta = datetime.timedelta(seconds=round(current_time - self.start_time))
        self.start_time = current_time
        return delta


def trie_stats(trie: Trie) -> str:
    outbuffer = io.StringIO()
    raw_stats = trie.raw_stats()
    layer_size = len(Symbol) + 1
    all_totals = [0 for _ in range(layer_size + 1)]
    outbuffer.write("layer     terminal  " +
                    "".join(f"{i:10}" for i in range(1, layer_size)) +
                    "     total\n")
    for i, layer_stats in enumerate(raw_stats):
        total = sum(layer_stats)
        for j in range(layer_size):
            all_totals[j] += layer_stats[j]
        all_totals[layer_size] += total
        line = [str(i)] + layer_stats + [total]  # type: ignore
        outbuffer.write("".join(f"{i:10}" for i in line) + "\n")
    last_line = ["total"] + all_totals  # type: ignore
    outbuffer.write("".join(f"{i:10}" for i in last_line) + "\n")
    empty_node = TrieNode()
    node_size = sys.getsizeof(empty_node) + sys.getsizeof(empty_node.children)
    node_memory_usage = node_size * all_totals[layer_size]
    mb = 1024 ** 2
    outbuffer.write(f"Sequences inserted: {trie.number_of_sequences}\n"
                    f"Node memory usage: {node_memory_usage / mb:.2f} MiB\n")
    return outbuffer.getvalue()


def scan(stream: IO[Any],
         window_length: int,
         trie: Trie,
         max_window_length: int = DEFAULT_MAX_WINDOW_LENGTH) -> int:
    """
    Insert every complete, non-overlapping window of window_length
    characters from the current position of stream into trie.

    A window cut short by the end of the stream is discarded. The stream is
    rewound to its start afterwards so another window length can be scanned.
    Returns the number of windows inserted.
    """
    if window_length > max_window_length:
        raise WindowTooLongError(
            f"Window length {window_length} exceeds the maximum window "
            f"length of {max_window_length}.")
    if window_length < 1:
        raise ValueError(f"Window length must be at least 1, "
                         f"got {window_length}.")
    windows = 0
    while True:
        window = stream.read(window_length)
        if len(window) < window_length:
            break
        trie.insert(decode(window_length, window))
        windows += 1
    stream.seek(0)
    return windows


class QueryCoordinator:
    """
    Resolves query counts against a single genome stream.

    Each distinct query length is scanned once per coordinator into a trie
    of its own, so windows of one length never add to the counts of another.
    Later calls to resolve reuse the tries that were already built.
    """
    def __init__(self,
                 stream: IO[Any],
                 max_window_length: int = DEFAULT_MAX_WINDOW_LENGTH):
        self.stream = stream
        self.max_window_length = max_window_length
        self.tries: Dict[int, Trie] = {}
        self.logger = logging.getLogger("genomecount")

    @property
    def scanned_lengths(self) -> Set[int]:
        return set(self.tries)

    def _decode_queries(self, queries: Iterable[str]
                        ) -> List[Tuple[str, Sequence]]:
        decoded = [(query, decode(len(query), query)) for query in queries]
        for query, sequence in decoded:
            if len(sequence) > self.max_window_length:
                name = query if len(query) <= 20 else query[:20] + "..."
                raise QueryTooLongError(
                    f"Query {name} has {len(sequence)} bases, "
                    f"which exceeds the maximum window length of "
                    f"{self.max_window_length}.")
            if not sequence:
                self.logger.warning(f"Query '{query}' contains no DNA bases "
                                    f"and will be reported as 0.")
        return decoded

    def scan_length(self, window_length: int) -> Trie:
        trie = self.tries.get(window_length)
        if trie is not None:
            return trie
        timer = Timer()
        trie = Trie()
        windows = scan(self.stream, window_length, trie,
                       self.max_window_length)
        self.tries[window_length] = trie
        self.logger.info(f"Scanned {windows} windows of length "
                         f"{window_length}. ({timer.get_difference()})")
        if self.logger.isEnabledFor(logging.DEBUG):
            # Do not perform expensive stats calc when not requested.
            self.logger.debug("\n" + trie_stats(trie))
        return trie

    def resolve(self, queries: Iterable[str]) -> List[Tuple[str, int]]:
        # All queries are validated before anything is scanned.
        decoded = self._decode_queries(queries)
        lengths = sorted(set(len(sequence) for _, sequence in decoded
                             if sequence))
        for length in lengths:
            self.scan_length(length)
        results = []
        for query, sequence in decoded:
            count = None
            if sequence:
                count = self.tries[len(sequence)].lookup(sequence)
            results.append((query, 0 if count is None else count))
        return results


def count_queries(queries: Iterable[str],
                  stream: IO[Any],
                  max_window_length: int = DEFAULT_MAX_WINDOW_LENGTH
                  ) -> List[Tuple[str, int]]:
    return QueryCoordinator(stream, max_window_length=max_window_length
                            ).resolve(queries)


def file_to_query_records(filename: str) -> Iterator[dnaio.SequenceRecord]:
    opener = functools.partial(xopen.xopen, threads=0)
    with dnaio.open(filename, mode="r", opener=opener) as reader:  # type: ignore
        yield from reader


def initiate_logger(verbose: int = 0, quiet: int = 0):
    log_level = logging.INFO - 10 * (verbose - quiet)
    logger = logging.getLogger("genomecount")
    logger.setLevel(log_level)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    formatter = logging.Formatter(
        "{asctime}:{levelname}:{name}: {message}",
        datefmt="%m/%d/%Y %I:%M:%S",
        style="{")
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Count occurrences of DNA sequences in non-overlapping "
                    "windows of a genome.")
    parser.add_argument(
        "genome", metavar="GENOME",
        help="Genome file. Characters other than A, C, G and T are ignored. "
             "Compressed files (.gz, .bz2, .xz) are supported.")
    parser.add_argument(
        "queries", metavar="QUERY", nargs="*",
        help="Sequence to count. Can be specified multiple times.")
    parser.add_argument(
        "-f", "--queries-file", action="append", default=[],
        help="FASTA or FASTQ file with sequences to count. Can be specified "
             "multiple times.")
    parser.add_argument("-m", "--max-window-length", type=int,
                        default=DEFAULT_MAX_WINDOW_LENGTH,
                        help=f"The maximum length of a query. "
                             f"Default: {DEFAULT_MAX_WINDOW_LENGTH}.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity.")
    parser.add_argument("-q", "--quiet", action="count", default=0,
                        help="Reduce log verbosity.")
    return parser


def main():
    parser = argument_parser()
    args = parser.parse_args()
    initiate_logger(args.verbose, args.quiet)
    logger = logging.getLogger("genomecount")

    queries: List[str] = list(args.queries)
    for queries_file in args.queries_file:
        for record in file_to_query_records(queries_file):
            logger.debug(f"Query {record.name}: {record.sequence}")
            queries.append(record.sequence)
    if not queries:
        parser.error("At least one QUERY or --queries-file is required.")

    timer = Timer()
    logger.info(f"Genome file: {args.genome}")
    logger.info(f"Number of queries: {len(queries)}")
    logger.info(f"Maximum window length: {args.max_window_length}")
    try:
        genome = xopen.xopen(args.genome, mode="rb", threads=0)
    except OSError as error:
        logger.error(f"Genome file at '{args.genome}' cannot be opened: "
                     f"{error}")
        sys.exit(2)
    with genome:
        # Every window length rescans the genome from the start.
        if not genome.seekable():
            logger.error(f"Genome file at '{args.genome}' is not seekable. "
                         f"Reading the genome from a pipe is not supported.")
            sys.exit(2)
        try:
            results = count_queries(queries, genome, args.max_window_length)
        except QueryTooLongError as error:
            logger.error(str(error))
            sys.exit(3)
    for query, count in results:
        print(f"{query}\t{count}")
    resources = resource.getrusage(resource.RUSAGE_SELF)
    logger.info(f"Finished. Counted {len(results)} queries. "
                f"Total time: {timer.get_difference()}. "
                f"Memory usage: {resources.ru_maxrss / (1024 ** 2):.2} GiB")


if __name__ == "__main__":
    main()
