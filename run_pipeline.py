#!/usr/bin/env python3
"""run_pipeline.py

Batch bonus pipeline script:
- regenerates monthly per-seller aggregates (seller_monthly_agg.csv)
- ranks sellers by profit and assigns rank bonuses (seller_leaderboard.csv)
- awards the special-condition bonuses (special_bonuses.csv)

Usage:
    python run_pipeline.py --dataset sales_dataset.json --out-dir reports

This script is safe to run on a schedule (cron, GitHub Actions, etc.).
"""
import argparse
from pathlib import Path

from commission_calc import analyze_sales_data, calculate_bonus_by_profit, calculate_simple_revenue, compute_leaderboard
from dataset import load_dataset, monthly_seller_summary
from sales_stats import accumulate_metrics, simple_profit
from special_bonuses import SPECIAL_BONUS_RULES, bonuses_frame, calculate_special_bonuses

PROJ = Path(__file__).resolve().parent


def regenerate_monthly_agg(data, out_dir):
    monthly = monthly_seller_summary(data)
    monthly.to_csv(out_dir / 'seller_monthly_agg.csv', index=False)
    print('Saved seller_monthly_agg.csv')
    return monthly


def create_leaderboard(data, out_dir):
    reports = analyze_sales_data(data, {
        'calculate_revenue': calculate_simple_revenue,
        'calculate_bonus': calculate_bonus_by_profit,
    })
    leaderboard = compute_leaderboard(reports)
    leaderboard.to_csv(out_dir / 'seller_leaderboard.csv', index=False)
    print('Saved seller_leaderboard.csv')
    return leaderboard


def create_special_bonuses(data, out_dir):
    results = calculate_special_bonuses(data, {
        'calculate_profit': simple_profit,
        'accumulate_metrics': accumulate_metrics,
    }, SPECIAL_BONUS_RULES)
    bonuses = bonuses_frame(results)
    bonuses.to_csv(out_dir / 'special_bonuses.csv', index=False)
    print('Saved special_bonuses.csv')
    return bonuses


def main(dataset_path, out_dir):
    data = load_dataset(dataset_path)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    print(f"Loaded {len(data['purchase_records'])} purchase records for {len(data['sellers'])} sellers")
    regenerate_monthly_agg(data, out_dir)
    create_leaderboard(data, out_dir)
    create_special_bonuses(data, out_dir)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--dataset', default=str(PROJ / 'sales_dataset.json'))
    parser.add_argument('--out-dir', default=str(PROJ))
    args = parser.parse_args()
    main(args.dataset, args.out_dir)
