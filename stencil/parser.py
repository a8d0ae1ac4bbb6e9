"""
Парсер токенов шаблона в дерево узлов.

Разбирает плоский список токенов, вызывая для блочных тегов
зарегистрированные в расширениях функции разбора. Вложенные
конструкции разбираются рекурсивно через parse(until([...])).
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Callable, Deque, Iterable, List, Optional, Sequence

from .errors import attach_token
from .nodes import NodeType, TextNode, VariableNode
from .tokens import Behaviour, Token, TokenKind
from .trim import NOTHING, Trim, TrimBehaviour
from .values import Resolvable

if TYPE_CHECKING:
    from .environment import Environment
    from .expressions import Expression

StopPredicate = Callable[["TokenParser", Token], bool]
TagParser = Callable[["TokenParser", Token], NodeType]


def until(tags: Sequence[str]) -> StopPredicate:
    """
    Создаёт условие остановки разбора на одном из указанных тегов.

    Используется для разбора тела конструкции до закрывающего тега:
    `parser.parse(until(["endif", "else"]))`.
    """
    names = frozenset(tags)

    def predicate(parser: TokenParser, token: Token) -> bool:
        components = token.components
        return bool(components) and components[0] in names

    return predicate


class TokenParser:
    """
    Превращает список токенов в список узлов.

    Помнит уже прочитанные токены, чтобы теги могли проверить,
    внутри какой конструкции они находятся.
    """

    def __init__(self, tokens: Iterable[Token], environment: Environment):
        """
        Args:
            tokens: Токены шаблона
            environment: Окружение с расширениями и политикой обрезки
        """
        self.tokens: Deque[Token] = deque(tokens)
        self.parsed_tokens: List[Token] = []
        self.environment = environment
        # Маркер пробелов закрывающего разделителя последнего блочного тега
        self._previous_whitespace: Optional[Behaviour] = None

    def parse(self, parse_until: Optional[StopPredicate] = None) -> List[NodeType]:
        """
        Разбирает токены до конца или до тега, на котором срабатывает parse_until.

        Тег остановки возвращается в начало очереди и не потребляется.

        Args:
            parse_until: Условие остановки, см. until()

        Returns:
            Список узлов

        Raises:
            TemplateSyntaxError: Неизвестный тег или ошибка разбора тега
        """
        nodes: List[NodeType] = []

        while self.tokens:
            token = self.next_token()

            if token.kind is TokenKind.TEXT:
                nodes.append(TextNode(token.contents, self._trim_behaviour(), token))

            elif token.kind is TokenKind.VARIABLE:
                self._previous_whitespace = None
                try:
                    nodes.append(VariableNode.parse(self, token))
                except Exception as error:
                    raise attach_token(error, token)

            elif token.kind is TokenKind.BLOCK:
                self._previous_whitespace = token.whitespace.trailing if token.whitespace else None

                if parse_until is not None and parse_until(self, token):
                    self.prepend_token(token)
                    return nodes

                components = token.components
                if not components:
                    continue

                name = components[0]
                if name.endswith(":") and len(components) > 1:
                    # `label: for ...` разбирается тегом, следующим за меткой
                    name = components[1]

                try:
                    tag_parser = self.environment.find_tag(name)
                    nodes.append(tag_parser(self, token))
                except Exception as error:
                    raise attach_token(error, token)

            else:
                # Комментарии не выводятся
                self._previous_whitespace = None

        return nodes

    def next_token(self) -> Optional[Token]:
        """Извлекает следующий токен или возвращает None, если токены кончились."""
        if not self.tokens:
            return None
        token = self.tokens.popleft()
        self.parsed_tokens.append(token)
        return token

    def prepend_token(self, token: Token) -> None:
        """Возвращает токен в начало очереди."""
        self.tokens.appendleft(token)
        if self.parsed_tokens:
            self.parsed_tokens.pop()

    def peek_whitespace(self) -> Optional[Behaviour]:
        """Маркер открывающего разделителя следующего токена, если это блочный тег."""
        if self.tokens and self.tokens[0].whitespace is not None:
            return self.tokens[0].whitespace.leading
        return None

    def has_opened_for_tag(self) -> bool:
        """Проверяет, что текущая позиция разбора находится внутри тела цикла."""
        open_for_count = 0
        for token in self.parsed_tokens:
            if token.kind is not TokenKind.BLOCK:
                continue
            components = token.components
            if not components:
                continue
            if components[0] == "endfor":
                open_for_count -= 1
            elif components[0] == "for" or (
                components[0].endswith(":") and len(components) > 1 and components[1] == "for"
            ):
                open_for_count += 1
        return open_for_count > 0

    def compile_filter(self, filter_token: str, contained_in: Optional[Token] = None) -> Resolvable:
        return self.environment.compile_filter(filter_token, contained_in)

    def compile_expression(self, components: Sequence[str], token: Optional[Token] = None) -> Expression:
        return self.environment.compile_expression(components, token)

    def compile_resolvable(self, text: str, contained_in: Optional[Token] = None) -> Resolvable:
        return self.environment.compile_resolvable(text, contained_in)

    def _trim_behaviour(self) -> TrimBehaviour:
        """
        Правила обрезки для текста между двумя тегами.

        Явный маркер `-` обрезает все пробелы и переводы строк, `+` запрещает
        обрезку. Без маркера действует политика окружения: начало текста
        (после тега) обрезается по её trailing-правилу, конец текста
        (перед тегом) по leading-правилу.
        """
        policy = self.environment.trim_behaviour
        leading = Trim.NOTHING
        trailing = Trim.NOTHING

        previous = self._previous_whitespace
        if previous is not None:
            leading = policy.trailing if previous is Behaviour.UNSPECIFIED else _explicit(previous)

        following = self.peek_whitespace()
        if following is not None:
            trailing = policy.leading if following is Behaviour.UNSPECIFIED else _explicit(following)

        if leading is Trim.NOTHING and trailing is Trim.NOTHING:
            return NOTHING
        return TrimBehaviour(leading, trailing)


def _explicit(behaviour: Behaviour) -> Trim:
    return Trim.WHITESPACE_AND_NEWLINES if behaviour is Behaviour.TRIM else Trim.NOTHING


def levenshtein_distance(source: str, target: str) -> int:
    """Редакционное расстояние между строками (две строки матрицы)."""
    last = list(range(len(target) + 1))
    current = [0] * (len(target) + 1)

    for i, source_char in enumerate(source):
        current[0] = i + 1
        for j, target_char in enumerate(target):
            current[j + 1] = min(
                last[j + 1] + 1,
                current[j] + 1,
                last[j] + (0 if source_char == target_char else 1),
            )
        last, current = current, last

    return last[len(target)]


def suggest_names(name: str, candidates: Iterable[str]) -> List[str]:
    """
    Подбирает похожие имена для сообщения об ошибке.

    Имена, которые короче расстояния до искомого, не предлагаются.
    Возвращаются все имена с минимальным расстоянием.
    """
    scored = []
    for candidate in candidates:
        distance = levenshtein_distance(candidate, name)
        if len(candidate) > distance:
            scored.append((candidate, distance))

    if not scored:
        return []

    minimum = min(distance for _, distance in scored)
    return [candidate for candidate, distance in scored if distance == minimum]


__all__ = [
    "TokenParser",
    "TagParser",
    "StopPredicate",
    "until",
    "levenshtein_distance",
    "suggest_names",
]
