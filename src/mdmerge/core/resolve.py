"""Per-entry conflict resolution: which side's text survives, and why"""

from mdmerge.core.analysis import FileAnalysis
from mdmerge.core.models import AlignmentEntry, Decision, EntryType, Preference, Resolution


class ConflictResolver:
    """Decide the output text for one alignment entry.

    Priority: freeze blocks, and blocks whose span carries one, always win;
    matched pairs follow the preference; template-only content is added only
    when opted in; destination-only content is always kept.
    """

    def __init__(
        self,
        preference: Preference,
        add_template_only_nodes: bool,
        template_analysis: FileAnalysis,
        dest_analysis: FileAnalysis,
        ):
        self.preference = Preference(preference)
        self.add_template_only_nodes = add_template_only_nodes
        self.template_analysis = template_analysis
        self.dest_analysis = dest_analysis

    def resolve(self, entry: AlignmentEntry) -> Resolution:
        t_node, d_node = entry.template_node, entry.dest_node

        if entry.type == EntryType.match:
            if self.dest_analysis.frozen_within(d_node):
                return Resolution(Preference.destination, Decision.frozen, self.dest_analysis.statement_source(d_node))
            if self.template_analysis.frozen_within(t_node):
                return Resolution(Preference.template, Decision.frozen, self.template_analysis.statement_source(t_node))
            if self.preference == Preference.template:
                text = self.template_analysis.statement_source(t_node)
                return Resolution(Preference.template, Decision.template, text)
            text = self.dest_analysis.statement_source(d_node)
            return Resolution(Preference.destination, Decision.destination, text)

        if entry.type == EntryType.dest_only:
            text = self.dest_analysis.statement_source(d_node)
            if self.dest_analysis.frozen_within(d_node):
                return Resolution(Preference.destination, Decision.frozen, text)
            return Resolution(Preference.destination, Decision.destination_only, text)

        if self.add_template_only_nodes:
            text = self.template_analysis.statement_source(t_node)
            return Resolution(Preference.template, Decision.template_only, text)
        return Resolution(None, Decision.skipped, None)
