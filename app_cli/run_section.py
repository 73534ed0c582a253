from __future__ import annotations
import argparse, json
from career_core.question_bank import SECTIONS, filter_by_type
from career_core.pipeline import upsert_section
from career_core.scoring import section_score
from career_core.types import Answer

def ask(prompt: str) -> str:
    while True:
        v = input(prompt + " ").strip()
        if v.isdigit() and 1 <= int(v) <= 5: return v
        print("Enter a number from 1 to 5.")

def main():
    ap = argparse.ArgumentParser(description="Answer one assessment section in the terminal.")
    ap.add_argument("section", choices=SECTIONS)
    ap.add_argument("--user", help="submit the answers for this user id through the pipeline")
    ap.add_argument("--incomplete", action="store_true", help="do not mark the section completed")
    args = ap.parse_args()

    print(f"{args.section} section  [1=strongly disagree, 5=strongly agree]")
    answers = []
    for q in filter_by_type(args.section):
        v = ask(f"({q.category}) {q.text}")
        answers.append(Answer(question_id=q.id, answer=v, value=int(v)))
    print(f"Section score: {section_score(answers)}/10")
    if not args.user:
        return

    from api.storage import RECORDS, USERS
    res = upsert_section(RECORDS, USERS.get(args.user), args.user, args.section, answers, not args.incomplete)
    sug = res.record.career_suggestion
    print(f"Plan level: {res.plan_level or '-'}  allComplete={res.all_complete}")
    if sug:
        print(json.dumps(sug.to_dict(), indent=2, ensure_ascii=False))

if __name__ == "__main__": main()
