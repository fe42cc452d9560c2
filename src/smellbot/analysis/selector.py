import random
from typing import Iterable, List, MutableSequence, NamedTuple, Optional

from smellbot.comments.corpus import CommentCorpus
from smellbot.domain.analysis_dto import AnalysisResultDTO


class SelectedComment(NamedTuple):
    smell_id: str
    content: bytes


def flatten_smells(results: Iterable[AnalysisResultDTO]) -> List[str]:
    """Smell identifiers of all results, in the order they were reported."""
    smells: List[str] = []
    for result in results:
        smells.extend(result.smell_ids())
    return smells


def shuffle_smells(smells: MutableSequence[str], rng: random.Random) -> None:
    """Shuffle in place so that every permutation is equally likely."""
    for i in range(1, len(smells)):
        j = rng.randint(0, i)
        smells[i], smells[j] = smells[j], smells[i]


class SmellSelector:
    """
    Picks one comment for a set of analysis results.

    Each detected smell occurrence has the same chance of being the one
    commented on; a smell reported twice is twice as likely to be picked.
    """

    def __init__(self, corpus: CommentCorpus):
        self.corpus = corpus

    def select(
        self, results: Iterable[AnalysisResultDTO], rng: random.Random
    ) -> Optional[SelectedComment]:
        smells = flatten_smells(results)
        shuffle_smells(smells, rng)
        for smell_id in smells:
            content = self.corpus.get(smell_id)
            if content:
                return SelectedComment(smell_id, content)
        return None
