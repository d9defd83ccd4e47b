"""
Curriculum catalog - grade -> semester -> unit -> sub-topics.

Korean elementary mathematics, grades 1-6. The catalog is static: it is built
once at import and exposed read-only.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

MATH_CONCEPTS: Dict[str, Dict[str, Dict[str, List[str]]]] = {
    "1학년": {
        "1학기": {
            "9까지의 수": ["9까지의 수 세기", "수의 순서", "1 큰 수와 1 작은 수", "수의 크기 비교"],
            "여러 가지 모양": ["모양 찾기", "모양 분류하기", "모양 만들기"],
            "덧셈과 뺄셈": ["모으기와 가르기", "덧셈하기", "뺄셈하기", "0을 더하거나 빼기"],
            "비교하기": ["길이 비교", "무게 비교", "넓이 비교", "담을 수 있는 양 비교"],
            "50까지의 수": ["10 알아보기", "십몇 알아보기", "50까지의 수 세기", "수의 크기 비교"],
        },
        "2학기": {
            "100까지의 수": ["몇십 알아보기", "99까지의 수", "수의 순서", "짝수와 홀수"],
            "덧셈과 뺄셈(1)": ["받아올림이 없는 덧셈", "받아내림이 없는 뺄셈", "세 수의 계산"],
            "모양과 시각": ["여러 가지 모양", "몇 시 알아보기", "몇 시 30분 알아보기"],
            "덧셈과 뺄셈(2)": ["10이 되는 더하기", "10에서 빼기", "받아올림이 있는 덧셈", "받아내림이 있는 뺄셈"],
            "규칙 찾기": ["규칙 찾기", "규칙 만들기", "수 배열에서 규칙 찾기"],
            "덧셈과 뺄셈(3)": ["두 자리 수의 덧셈", "두 자리 수의 뺄셈", "덧셈과 뺄셈의 관계"],
        },
    },
    "2학년": {
        "1학기": {
            "세 자리 수": ["백 알아보기", "세 자리 수 읽고 쓰기", "자릿값", "수의 크기 비교"],
            "여러 가지 도형": ["삼각형과 사각형", "원", "칠교판으로 모양 만들기", "쌓기나무"],
            "덧셈과 뺄셈": ["받아올림이 있는 덧셈", "받아내림이 있는 뺄셈", "세 수의 계산", "□가 사용된 식"],
            "길이 재기": ["여러 가지 단위로 재기", "1cm 알아보기", "자로 길이 재기", "길이 어림하기"],
            "분류하기": ["분류 기준 정하기", "기준에 따라 분류하기", "분류하여 세어 보기"],
            "곱셈": ["묶어 세기", "몇의 몇 배", "곱셈식으로 나타내기"],
        },
        "2학기": {
            "네 자리 수": ["천 알아보기", "네 자리 수", "뛰어 세기", "수의 크기 비교"],
            "곱셈구구": ["2단~5단", "6단~9단", "1단과 0의 곱", "곱셈표"],
            "길이 재기": ["1m 알아보기", "길이의 합", "길이의 차", "길이 어림하기"],
            "시각과 시간": ["몇 시 몇 분", "여러 가지 방법으로 시각 읽기", "1시간 알아보기", "하루의 시간", "달력 알아보기"],
            "표와 그래프": ["표로 나타내기", "그래프로 나타내기", "표와 그래프의 내용 알아보기"],
            "규칙 찾기": ["무늬에서 규칙 찾기", "쌓은 모양에서 규칙 찾기", "덧셈표와 곱셈표에서 규칙 찾기"],
        },
    },
    "3학년": {
        "1학기": {
            "덧셈과 뺄셈": ["세 자리 수의 덧셈", "세 자리 수의 뺄셈", "덧셈과 뺄셈의 어림"],
            "평면도형": ["선분, 반직선, 직선", "각과 직각", "직각삼각형", "직사각형과 정사각형"],
            "나눗셈": ["똑같이 나누기", "곱셈과 나눗셈의 관계", "나눗셈의 몫 구하기"],
            "곱셈": ["(몇십)×(몇)", "올림이 없는 (몇십몇)×(몇)", "올림이 있는 (몇십몇)×(몇)"],
            "길이와 시간": ["1cm보다 작은 단위", "1m보다 큰 단위", "1분보다 작은 단위", "시간의 덧셈과 뺄셈"],
            "분수와 소수": ["똑같이 나누기", "분수 알아보기", "분수의 크기 비교", "소수 알아보기"],
        },
        "2학기": {
            "곱셈": ["(세 자리 수)×(한 자리 수)", "(몇십)×(몇십)", "(두 자리 수)×(두 자리 수)"],
            "나눗셈": ["(몇십)÷(몇)", "(두 자리 수)÷(한 자리 수)", "나머지가 있는 나눗셈", "(세 자리 수)÷(한 자리 수)"],
            "원": ["원의 중심, 반지름, 지름", "컴퍼스로 원 그리기", "원을 이용한 모양 그리기"],
            "분수": ["분수로 나타내기", "분수만큼은 얼마인지 알아보기", "진분수, 가분수, 대분수", "분모가 같은 분수의 크기 비교"],
            "들이와 무게": ["들이 비교", "들이의 단위", "들이의 덧셈과 뺄셈", "무게의 단위", "무게의 덧셈과 뺄셈"],
            "자료의 정리": ["표로 나타내기", "그림그래프", "그림그래프로 나타내기"],
        },
    },
    "4학년": {
        "1학기": {
            "큰 수": ["만 알아보기", "십만, 백만, 천만", "억과 조", "뛰어 세기", "수의 크기 비교"],
            "각도": ["각의 크기", "예각과 둔각", "각도의 합과 차", "삼각형과 사각형의 각의 합"],
            "곱셈과 나눗셈": ["(세 자리 수)×(몇십)", "(세 자리 수)×(두 자리 수)", "(세 자리 수)÷(몇십)", "(세 자리 수)÷(두 자리 수)"],
            "평면도형의 이동": ["밀기", "뒤집기", "돌리기", "무늬 꾸미기"],
            "막대그래프": ["막대그래프 알아보기", "막대그래프로 나타내기", "막대그래프 해석하기"],
            "규칙 찾기": ["수의 배열에서 규칙 찾기", "도형의 배열에서 규칙 찾기", "계산식에서 규칙 찾기"],
        },
        "2학기": {
            "분수의 덧셈과 뺄셈": ["진분수의 덧셈", "진분수의 뺄셈", "대분수의 덧셈", "대분수의 뺄셈"],
            "삼각형": ["이등변삼각형", "정삼각형", "예각삼각형과 둔각삼각형"],
            "소수의 덧셈과 뺄셈": ["소수 두 자리 수", "소수 세 자리 수", "소수의 크기 비교", "소수의 덧셈", "소수의 뺄셈"],
            "사각형": ["수직과 수선", "평행과 평행선", "사다리꼴", "평행사변형", "마름모"],
            "꺾은선그래프": ["꺾은선그래프 알아보기", "꺾은선그래프로 나타내기", "꺾은선그래프 해석하기"],
            "다각형": ["다각형과 정다각형", "대각선", "모양 만들기와 채우기"],
        },
    },
    "5학년": {
        "1학기": {
            "자연수의 혼합 계산": ["덧셈과 뺄셈이 섞인 식", "곱셈과 나눗셈이 섞인 식", "괄호가 있는 식", "사칙연산이 섞인 식"],
            "약수와 배수": ["약수와 배수", "공약수와 최대공약수", "공배수와 최소공배수"],
            "규칙과 대응": ["두 양 사이의 관계", "대응 관계를 식으로 나타내기", "생활 속 대응 관계"],
            "약분과 통분": ["크기가 같은 분수", "약분", "통분", "분수와 소수의 크기 비교"],
            "분수의 덧셈과 뺄셈": ["분모가 다른 진분수의 덧셈", "분모가 다른 대분수의 덧셈", "분모가 다른 분수의 뺄셈"],
            "다각형의 둘레와 넓이": ["다각형의 둘레", "직사각형의 넓이", "평행사변형의 넓이", "삼각형의 넓이", "마름모와 사다리꼴의 넓이"],
        },
        "2학기": {
            "수의 범위와 어림하기": ["이상, 이하, 초과, 미만", "올림", "버림", "반올림"],
            "분수의 곱셈": ["(분수)×(자연수)", "(자연수)×(분수)", "진분수의 곱셈", "대분수의 곱셈"],
            "합동과 대칭": ["도형의 합동", "합동인 도형의 성질", "선대칭도형", "점대칭도형"],
            "소수의 곱셈": ["(소수)×(자연수)", "(자연수)×(소수)", "(소수)×(소수)", "곱의 소수점 위치"],
            "직육면체": ["직육면체와 정육면체", "직육면체의 성질", "겨냥도", "전개도"],
            "평균과 가능성": ["평균 구하기", "평균 이용하기", "일이 일어날 가능성"],
        },
    },
    "6학년": {
        "1학기": {
            "분수의 나눗셈": ["(자연수)÷(자연수)의 몫을 분수로", "(분수)÷(자연수)", "(대분수)÷(자연수)"],
            "각기둥과 각뿔": ["각기둥", "각기둥의 전개도", "각뿔"],
            "소수의 나눗셈": ["(소수)÷(자연수)", "몫이 1보다 작은 소수의 나눗셈", "(자연수)÷(자연수)의 몫을 소수로", "몫의 어림"],
            "비와 비율": ["두 수 비교하기", "비", "비율", "백분율"],
            "여러 가지 그래프": ["그림그래프", "띠그래프", "원그래프", "그래프 해석하기"],
            "직육면체의 부피와 겉넓이": ["부피 비교", "1cm³와 1m³", "직육면체의 부피", "직육면체의 겉넓이"],
        },
        "2학기": {
            "분수의 나눗셈": ["분모가 같은 (분수)÷(분수)", "분모가 다른 (분수)÷(분수)", "(자연수)÷(분수)", "(대분수)÷(분수)"],
            "소수의 나눗셈": ["(소수)÷(소수)", "(자연수)÷(소수)", "몫을 반올림하여 나타내기", "나누어 주고 남는 양"],
            "공간과 입체": ["여러 방향에서 본 모양", "쌓기나무의 개수", "위, 앞, 옆에서 본 모양", "층별로 나타낸 모양"],
            "비례식과 비례배분": ["비의 성질", "간단한 자연수의 비로 나타내기", "비례식", "비례배분"],
            "원의 넓이": ["원주와 지름", "원주율", "원의 넓이 어림하기", "원의 넓이 구하기"],
            "원기둥, 원뿔, 구": ["원기둥", "원기둥의 전개도", "원뿔", "구"],
        },
    },
}


class CurriculumCatalog:
    """Read-only lookup over grade -> semester -> unit -> sub-topics."""

    def __init__(self, concepts: Mapping[str, Mapping[str, Mapping[str, List[str]]]]):
        self._concepts = MappingProxyType({
            grade: MappingProxyType({
                semester: MappingProxyType({
                    unit: tuple(sub_topics) for unit, sub_topics in units.items()
                })
                for semester, units in semesters.items()
            })
            for grade, semesters in concepts.items()
        })

    @property
    def grades(self) -> List[str]:
        return list(self._concepts)

    def has_grade(self, grade: str) -> bool:
        return grade in self._concepts

    def units_by_semester(self, grade: str) -> Mapping[str, Mapping[str, Tuple[str, ...]]]:
        """Semester -> unit -> sub-topics for one grade (empty for unknown grades)."""
        return self._concepts.get(grade, MappingProxyType({}))

    def has_unit(self, grade: str, semester: str, unit: str) -> bool:
        return unit in self._concepts.get(grade, {}).get(semester, {})

    def sub_topics(self, grade: str, semester: str, unit: str) -> List[str]:
        """Ordered sub-topics of a unit; empty when the unit is unknown."""
        return list(self._concepts.get(grade, {}).get(semester, {}).get(unit, ()))

    def to_dict(self, grade: str) -> Dict[str, Dict[str, List[str]]]:
        return {
            semester: {unit: list(topics) for unit, topics in units.items()}
            for semester, units in self.units_by_semester(grade).items()
        }


@lru_cache
def get_catalog() -> CurriculumCatalog:
    """The shipped catalog, built once."""
    return CurriculumCatalog(MATH_CONCEPTS)
