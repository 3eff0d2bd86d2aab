"""
Time statistics aggregation.

Reduces a set of completed actions (task and project already loaded) into
totals and per-project, per-task and per-day breakdowns of hours and billable
amounts. Days are calendar days in the user's timezone.
"""
from donow.timezone_utils import local_date

MS_PER_HOUR = 3600 * 1000


def action_hours(action):
    return action.duration_ms / MS_PER_HOUR


def billable_amount(project, hours):
    """Hours times the hourly rate for billable projects, 0 otherwise."""
    if project is None or not project.is_billable:
        return 0.0
    return hours * float(project.hourly_rate or 0)


def _new_project_bucket(project):
    return {
        'id': project.pk,
        'name': project.name,
        'hours': 0.0,
        'amount': 0.0,
        'task_count': 0,
        'record_count': 0,
        'monthly_budget_limit': float(project.monthly_budget_limit or 0),
    }


def _new_task_bucket(task, project):
    return {
        'id': task.pk,
        'name': task.name,
        'project_id': project.pk if project else None,
        'project_name': project.name if project else None,
        'hours': 0.0,
        'amount': 0.0,
        'record_count': 0,
    }


def _new_day_bucket(date_key):
    return {
        'date': date_key,
        'hours': 0.0,
        'amount': 0.0,
        'record_count': 0,
        'projects': {},
        'tasks': {},
    }


def aggregate_time_stats(actions, user_tz):
    """
    Build the stats payload for a set of completed actions.

    Args:
        actions: iterable of actions with ``task`` and ``task.project`` resolved
        user_tz: timezone used to assign each action to a calendar day

    Returns:
        dict with total_hours, total_amount, project_stats, task_stats and
        daily_stats (daily stats sorted newest date first).

    Actions whose task has no project count towards the totals, task stats
    and daily totals only.
    """
    total_hours = 0.0
    total_amount = 0.0
    project_stats = {}
    project_task_ids = {}
    task_stats = {}
    daily_stats = {}

    for action in actions:
        task = action.task
        if task is None:
            continue
        project = task.project
        hours = action_hours(action)
        amount = billable_amount(project, hours)

        total_hours += hours
        total_amount += amount

        if project is not None:
            bucket = project_stats.get(project.pk)
            if bucket is None:
                bucket = project_stats[project.pk] = _new_project_bucket(project)
                project_task_ids[project.pk] = set()
            bucket['hours'] += hours
            bucket['amount'] += amount
            bucket['record_count'] += 1
            project_task_ids[project.pk].add(task.pk)
            bucket['task_count'] = len(project_task_ids[project.pk])

        task_bucket = task_stats.get(task.pk)
        if task_bucket is None:
            task_bucket = task_stats[task.pk] = _new_task_bucket(task, project)
        task_bucket['hours'] += hours
        task_bucket['amount'] += amount
        task_bucket['record_count'] += 1

        date_key = local_date(action.user_start_time, user_tz).isoformat()
        day = daily_stats.get(date_key)
        if day is None:
            day = daily_stats[date_key] = _new_day_bucket(date_key)
        day['hours'] += hours
        day['amount'] += amount
        day['record_count'] += 1

        if project is not None:
            day_project = day['projects'].setdefault(
                project.pk, {'id': project.pk, 'name': project.name, 'hours': 0.0, 'amount': 0.0}
            )
            day_project['hours'] += hours
            day_project['amount'] += amount

        day_task = day['tasks'].setdefault(task.pk, {
            'id': task.pk,
            'name': task.name,
            'project_name': project.name if project else None,
            'hours': 0.0,
            'amount': 0.0,
        })
        day_task['hours'] += hours
        day_task['amount'] += amount

    return {
        'total_hours': total_hours,
        'total_amount': total_amount,
        'project_stats': list(project_stats.values()),
        'task_stats': list(task_stats.values()),
        'daily_stats': [
            {
                **day,
                'projects': list(day['projects'].values()),
                'tasks': list(day['tasks'].values()),
            }
            for _date_key, day in sorted(daily_stats.items(), reverse=True)
        ],
    }
