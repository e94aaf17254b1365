# main.py - Household power consumption estimator (interactive terminal)

import os

from dotenv import load_dotenv

from appliance_editor import format_days, handle_edit_command, parse_days_input, show_appliance_detail
from database.connection import StorageError, open_storage
from services.appliance_service import ApplianceService
from services.consumption_service import CHART_MODES, ConsumptionService
from services.errors import ApplianceServiceError
from services.settings_service import SettingsService
from utils.logger import setup_logging

load_dotenv()


def ask(prompt, default=None):
    suffix = f" [{default}]" if default is not None else ""
    answer = input(f"   {prompt}{suffix}: ").strip()
    return answer if answer else (str(default) if default is not None else '')


def prompt_new_appliance():
    """Collect appliance fields from the terminal; returns a dict or None"""
    name = ask("Name")
    if not name:
        return None
    try:
        power = float(ask("Power (watts)"))
        hours = float(ask("Hours of use per day"))
        standby = float(ask("Standby power (watts)", 0))
    except ValueError:
        print("   ❌ Power, hours and standby must be numbers")
        return None
    days = parse_days_input(ask("Days used (e.g. all, weekdays, mon-fri, 1,3,5)", 'all'))
    if days is None:
        print("   ❌ Could not parse days")
        return None
    return {
        'name': name,
        'power_watts': power,
        'daily_hours': hours,
        'usage_days': days,
        'standby_watts': standby,
    }


def show_saved_appliances(appliance_service):
    """Display all saved appliances in a table with household totals"""
    listing = appliance_service.get_all()
    appliances = listing['appliances']

    if not appliances:
        print("\n📊 No appliances saved yet")
        return

    print("\n" + "="*88)
    print(f"📊 SAVED APPLIANCES ({len(appliances)} total)")
    print("="*88)
    print(f"{'ID':<5} {'Name':<22} {'Power':<9} {'Hours':<7} {'Days':<22} {'kWh/day':<9} {'kWh/month':<10}")
    print("-"*88)

    for a in appliances:
        est = a['consumption_estimates']
        print(f"{a['id']:<5} {a['name'][:21]:<22} {str(a['power_watts']) + 'W':<9} "
              f"{str(a['daily_hours']) + 'h':<7} {format_days(a['usage_days'])[:21]:<22} "
              f"{est['daily_kwh']:<9} {est['monthly_kwh']:<10}")

    total = listing['total_consumption']
    print("-"*88)
    print(f"{'TOTAL:':<66} {total['daily_kwh']:<9} {total['monthly_kwh']:<10}")
    print(f"{'Weekly total:':<66} {total['weekly_kwh']} kWh")
    print("="*88 + "\n")


def show_cost(consumption_service, settings_service, args):
    """cost            -> household cost at stored rate
       cost <id>       -> one appliance at stored rate
       cost <id> <rate>"""
    currency = settings_service.get_currency()
    if not args:
        result = consumption_service.calculate_household_cost()
        print(f"\n💰 Household at {result['rate_per_kwh']} {currency}/kWh")
    else:
        rate = float(args[1]) if len(args) > 1 else settings_service.get_rate()
        result = consumption_service.calculate_cost(args[0], rate)
        print(f"\n💰 Appliance {result['appliance_id']} at {result['rate_per_kwh']} {currency}/kWh")
    print(f"   Daily:   {result['daily_cost']:.2f} {currency}")
    print(f"   Weekly:  {result['weekly_cost']:.2f} {currency}")
    print(f"   Monthly: {result['monthly_cost']:.2f} {currency}\n")


def show_chart(consumption_service, mode):
    """Text bar chart from the chart series"""
    series = consumption_service.chart_series(mode)
    if not series:
        print("\n📊 Nothing to chart yet\n")
        return
    key = 'weekly_kwh' if mode == 'weekly' else 'daily_kwh'
    peak = max(item[key] for item in series) or 1
    print(f"\n📈 {mode.upper()} ({key})")
    for item in series:
        bar = '█' * int(round(item[key] / peak * 40))
        extra = f" ({item['share_percent']}%)" if mode == 'breakdown' else ''
        print(f"   {item['name'][:20]:<20} {bar} {item[key]}{extra}")
    print()


def command_loop(appliance_service, consumption_service, settings_service):
    """Main command loop"""
    print("\n" + "="*80)
    print("⚡ HOUSEHOLD POWER CONSUMPTION ESTIMATOR")
    print("="*80)
    print("\nCommands:")
    print("  add                 - Add an appliance")
    print("  list                - Show all appliances with estimates")
    print("  show <id>           - Show one appliance")
    print("  edit                - Edit or delete appliances")
    print("  total               - Total daily consumption")
    print("  cost [id] [rate]    - Cost estimate (household or one appliance)")
    print("  rate <value>        - Set the electricity rate per kWh")
    print(f"  chart [mode]        - Text chart ({', '.join(CHART_MODES)})")
    print("  quit                - Exit")
    print("="*80 + "\n")

    while True:
        cmd = input("> ").strip()
        if not cmd:
            continue

        parts = cmd.split()
        action, args = parts[0].lower(), parts[1:]

        if action in ('quit', 'exit', 'bye'):
            show_saved_appliances(appliance_service)
            break

        try:
            if action == 'add':
                data = prompt_new_appliance()
                if data is None:
                    print("   Cancelled.")
                    continue
                created = appliance_service.create(data)
                print(f"\n✅ SAVED '{created['name']}' (id {created['id']})")
                show_appliance_detail(appliance_service.get_by_id(created['id']))

            elif action == 'list':
                show_saved_appliances(appliance_service)

            elif action == 'show' and args:
                show_appliance_detail(appliance_service.get_by_id(args[0]))

            elif action == 'edit':
                handle_edit_command(appliance_service)

            elif action == 'total':
                total = consumption_service.calculate_total_daily()
                print(f"\n⚡ Total daily consumption: {total['total_daily_kwh']} kWh "
                      f"across {total['appliance_count']} appliances\n")

            elif action == 'cost':
                show_cost(consumption_service, settings_service, args)

            elif action == 'rate' and args:
                rate = settings_service.set_rate(float(args[0]))
                print(f"   ✅ Rate set to {rate}/kWh")

            elif action == 'chart':
                show_chart(consumption_service, args[0].lower() if args else 'daily')

            else:
                print("   ❌ Unknown command")

        except ApplianceServiceError as e:
            where = f" ({e.field})" if e.field else ''
            print(f"\n❌ {e.kind.value}{where}: {e.message}\n")
        except ValueError:
            print("   ❌ Expected a number")


def main():
    """Main entry point"""
    setup_logging(log_level=os.getenv('LOG_LEVEL', 'WARNING'))
    storage = None
    try:
        storage = open_storage()
        appliance_service = ApplianceService(storage)
        settings_service = SettingsService(storage)
        consumption_service = ConsumptionService(appliance_service, settings_service)
        command_loop(appliance_service, consumption_service, settings_service)
    except KeyboardInterrupt:
        print("\n\n👋 Exiting...\n")
    except StorageError as e:
        print(f"\n❌ Storage error: {e}")
    finally:
        if storage:
            storage.close()


if __name__ == "__main__":
    main()
