import logging

logger = logging.getLogger(__name__)

# Slack emoji per team name, as the API spells it
FLAG_OF = {
    "Austria": ":flag-at:",
    "Belgium": ":flag-be:",
    "Croatia": ":flag-hr:",
    "Czech Republic": ":flag-cz:",
    "Denmark": ":flag-dk:",
    "England": ":flag-england:",
    "Finland": ":flag-fi:",
    "France": ":flag-fr:",
    "Germany": ":flag-de:",
    "Hungary": ":flag-hu:",
    "Italy": ":flag-it:",
    "Netherlands": ":flag-nl:",
    "North Macedonia": ":flag-mk:",
    "Poland": ":flag-pl:",
    "Portugal": ":flag-pt:",
    "Russia": ":flag-ru:",
    "Scotland": ":flag-scotland:",
    "Slovakia": ":flag-sk:",
    "Spain": ":flag-es:",
    "Sweden": ":flag-se:",
    "Switzerland": ":flag-ch:",
    "Turkey": ":flag-tr:",
    "Ukraine": ":flag-ua:",
    "Wales": ":flag-wales:",
}


def flag_for(team_name: str) -> str:
    """Return the flag emoji for a team, or an empty string for unknown teams."""
    flag = FLAG_OF.get(team_name, "")
    if not flag:
        logger.debug(f"No flag for team {team_name!r}")
    return flag
