# appliance_editor.py
# Handles user commands to edit or delete saved appliances
# Works interactively in the terminal

from services.errors import ApplianceServiceError

DAY_NAMES = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']

DAY_ALIASES = {
    'all': [0, 1, 2, 3, 4, 5, 6],
    'daily': [0, 1, 2, 3, 4, 5, 6],
    'everyday': [0, 1, 2, 3, 4, 5, 6],
    'weekdays': [1, 2, 3, 4, 5],
    'weekday': [1, 2, 3, 4, 5],
    'wd': [1, 2, 3, 4, 5],
    'weekends': [0, 6],
    'weekend': [0, 6],
    'we': [0, 6],
}


def _day_number(token):
    token = token.strip().lower()
    if token.isdigit():
        day = int(token)
        return day if 0 <= day <= 6 else None
    for i, name in enumerate(DAY_NAMES):
        if token[:3] == name.lower():
            return i
    return None


def parse_days_input(days_str):
    """
    Parse a user-friendly day list into day numbers (0 = Sunday).

    Accepts:
      "weekdays", "weekends", "all", "1,2,3", "mon,wed,fri", "mon-fri", "sat-sun"

    Returns:
      list of ints, or None if invalid
    """
    days_str = days_str.strip().lower().replace(' ', '')
    if not days_str:
        return None

    if days_str in DAY_ALIASES:
        return list(DAY_ALIASES[days_str])

    days = []
    for part in days_str.split(','):
        if '-' in part:
            bounds = part.split('-')
            if len(bounds) != 2:
                return None
            start, end = _day_number(bounds[0]), _day_number(bounds[1])
            if start is None or end is None:
                return None
            # Ranges may wrap past Saturday, e.g. fri-mon
            day = start
            while True:
                days.append(day)
                if day == end:
                    break
                day = (day + 1) % 7
        else:
            day = _day_number(part)
            if day is None:
                return None
            days.append(day)

    return list(dict.fromkeys(days))


def format_days(days):
    """[1, 2, 3, 4, 5] -> 'Mon Tue Wed Thu Fri'"""
    if sorted(days) == list(range(7)):
        return 'Every day'
    return ' '.join(DAY_NAMES[d] for d in days if 0 <= d <= 6)


def show_appliance_detail(appliance):
    """Show all fields of a single appliance"""
    estimates = appliance.get('consumption_estimates') or {}
    print(f"\n   {'Field':<20} {'Value':<30}")
    print(f"   {'-'*50}")
    print(f"   {'ID':<20} {appliance['id']}")
    print(f"   {'Name':<20} {appliance['name']}")
    print(f"   {'Power':<20} {appliance['power_watts']}W")
    print(f"   {'Usage/day':<20} {appliance['daily_hours']}h")
    print(f"   {'Standby':<20} {appliance['standby_watts']}W")
    print(f"   {'Days':<20} {format_days(appliance['usage_days'])}")
    if estimates:
        print(f"   {'Daily':<20} {estimates['daily_kwh']} kWh")
        print(f"   {'Weekly':<20} {estimates['weekly_kwh']} kWh")
        print(f"   {'Monthly':<20} {estimates['monthly_kwh']} kWh")
    print()


def _parse_number(value_str, unit):
    return float(value_str.lower().replace(unit, '').strip())


def edit_appliance_field(appliance_service, appliance_id, field, value_str):
    """
    Update one field of an appliance from user text.

    Supported fields:
      name            -> str
      power           -> watts
      hours           -> hours per usage day
      standby         -> standby watts
      days            -> see parse_days_input

    Returns:
      (updated appliance or None, error message or None)
    """
    field = field.lower()
    try:
        if field == 'name':
            update = {'name': value_str}
        elif field in ('power', 'watts'):
            update = {'power_watts': _parse_number(value_str, 'w')}
        elif field in ('hours', 'usage'):
            update = {'daily_hours': _parse_number(value_str, 'h')}
        elif field == 'standby':
            update = {'standby_watts': _parse_number(value_str, 'w')}
        elif field in ('days', 'schedule'):
            days = parse_days_input(value_str)
            if days is None:
                return None, "Could not parse days. Try: weekdays, mon-fri or 1,3,5"
            update = {'usage_days': days}
        else:
            return None, f"Unknown field '{field}'. Options: name, power, hours, standby, days"
    except ValueError:
        return None, f"{field} must be a number"

    try:
        return appliance_service.update(appliance_id, update), None
    except ApplianceServiceError as e:
        return None, e.message


def handle_edit_command(appliance_service):
    """
    Interactive editor for saved appliances.

    Commands:
      delete <#>                 - Delete appliance by list number
      edit <#>                   - Show all fields and edit interactively
      edit <#> <field> <value>   - Quick edit (name, power, hours, standby, days)
      done                       - Leave edit mode
    """
    appliances = appliance_service.get_all()['appliances']

    if not appliances:
        print("\n📊 No appliances to edit. Add some first!\n")
        return

    print("\n" + "="*80)
    print("✏️  EDIT MODE — Modify your saved appliances")
    print("="*80)
    print(f"\n{'#':<3} {'Name':<24} {'Power':<10} {'Hours/Day':<10} {'Days':<28}")
    print("-"*80)
    for i, a in enumerate(appliances, 1):
        print(f"{i:<3} {a['name'][:23]:<24} {str(a['power_watts']) + 'W':<10} "
              f"{str(a['daily_hours']) + 'h':<10} {format_days(a['usage_days']):<28}")
    print("-"*80)
    print("\nCommands:")
    print("  delete <#>                    — Remove an appliance")
    print("  edit <#>                      — View all fields & edit interactively")
    print("  edit <#> power <watts>        — Change power (e.g., edit 3 power 200)")
    print("  edit <#> hours <hours>        — Change daily usage (e.g., edit 3 hours 4.5)")
    print("  edit <#> standby <watts>      — Change standby draw (e.g., edit 3 standby 2)")
    print("  edit <#> days <days>          — Change usage days (e.g., edit 3 days mon-fri)")
    print("  edit <#> name <new name>      — Rename (e.g., edit 3 name LED Light)")
    print("  done                          — Exit edit mode")
    print()

    while True:
        cmd = input("Edit> ").strip()

        if not cmd:
            continue

        if cmd.lower() == 'done':
            print("✓ Exiting edit mode.\n")
            break

        parts = cmd.split(None, 2)
        action = parts[0].lower()

        if len(parts) < 2 or action not in ('delete', 'edit'):
            print("   ❌ Unknown command. Use: delete <#>, edit <#> [field] [value], done")
            continue

        try:
            idx = int(parts[1]) - 1
        except ValueError:
            print(f"   ❌ Usage: {action} <number>")
            continue
        if not (0 <= idx < len(appliances)):
            print(f"   ❌ Invalid number. Use 1-{len(appliances)}")
            continue

        target = appliances[idx]

        if action == 'delete':
            confirm = input(f"   Delete '{target['name']}'? (yes/no): ").strip().lower()
            if confirm not in ('yes', 'y'):
                print("   Cancelled.")
                continue
            try:
                appliance_service.delete(target['id'])
            except ApplianceServiceError as e:
                print(f"   ❌ Delete failed: {e.message}")
                continue
            print(f"   ✅ Deleted '{target['name']}'")
            appliances.pop(idx)
            continue

        if len(parts) == 2:
            show_appliance_detail(target)
            print("   Enter field to edit (or 'back' to return):")
            print("   Options: name, power, hours, standby, days")
            field_cmd = input("   Edit field> ").strip()
            if not field_cmd or field_cmd.lower() == 'back':
                continue
            parts = ['edit', parts[1], field_cmd]

        field = parts[2].split()[0]
        value_str = parts[2][len(field):].strip()
        if not value_str:
            value_str = input(f"   New value for {field}: ").strip()
        if not value_str:
            print("   Cancelled.")
            continue

        updated, err = edit_appliance_field(appliance_service, target['id'], field, value_str)
        if updated:
            appliances[idx] = updated
            print(f"   ✅ {field} updated")
            show_appliance_detail(updated)
        else:
            print(f"   ❌ Error: {err}")
