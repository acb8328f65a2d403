from __future__ import annotations

from typing import List, Sequence, Tuple

NUMBERS = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}

TENS = {20, 30, 40, 50, 60, 70, 80, 90}

MULTIPLIERS = {
    "hundred": 100,
    "thousand": 1000,
}

# "two thousand n five", the recognizer often hears "and" as "n"
CONJUNCTIONS = {"n", "and"}


def number_until(words: Sequence[str]) -> Tuple[int, int, bool]:
    """
    Parse one number from the start of `words`.

    Returns (value, cost, ok), cost being how many words the number used.

        ["haha", "seven", "two"]                 -> (0, 1, False)
        ["seven", "two", "thousand"]             -> (7, 1, True)
        ["two", "thousand", "n", "six", "hundred", "n", "five", "haha"]
                                                 -> (2605, 7, True)
    """
    if not words:
        return 0, 0, False

    value = NUMBERS.get(words[0].lower())
    if value is None:
        return 0, 1, False
    cost = 1

    # "twenty one"
    if value in TENS and cost < len(words):
        unit = NUMBERS.get(words[cost].lower())
        if unit is not None and 1 <= unit <= 9:
            value += unit
            cost += 1

    if cost >= len(words):
        return value, cost, True

    mul = MULTIPLIERS.get(words[cost].lower())
    if mul is None:
        return value, cost, True

    # "two thousand"
    value *= mul
    cost += 1
    if cost >= len(words):
        return value, cost, True

    # "two thousand hundred"
    mul2 = MULTIPLIERS.get(words[cost].lower())
    if mul2 is not None:
        value *= mul2
        cost += 1
        if cost >= len(words):
            return value, cost, True

    if words[cost].lower() in CONJUNCTIONS:
        cost += 1
        if cost >= len(words):
            return value, cost, True

    # only sum up a smaller tail, so "two hundred n twenty" -> 220
    # but "two hundred one hundred" stays two numbers
    rest, rest_cost, ok = number_until(words[cost:])
    if ok and rest < mul:
        return value + rest, cost + rest_cost, True
    return value, cost, True


def replace_numbers(words: Sequence[str]) -> List[str]:
    """Replace every run of number words with its decimal string."""
    out: List[str] = []
    i = 0
    while i < len(words):
        value, cost, ok = number_until(words[i:])
        if ok:
            out.append(str(value))
            i += cost
        else:
            out.append(words[i])
            i += 1
    return out
